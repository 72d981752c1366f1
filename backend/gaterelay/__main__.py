"""Run the relay with uvicorn: ``python -m gaterelay``."""

import uvicorn

from gaterelay.core.config import settings


def main() -> None:
    uvicorn.run(
        "gaterelay.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    main()
