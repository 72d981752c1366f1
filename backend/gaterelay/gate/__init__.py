"""Gate request coordination."""

from gaterelay.gate.coordinator import GateCoordinator
from gaterelay.gate.state import GateRequestState

__all__ = [
    "GateCoordinator",
    "GateRequestState",
]
