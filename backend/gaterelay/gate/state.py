"""
Gate request state.

Tracks whether the gate is currently expected to open and where the
outcome should be reported. One instance lives for the whole process.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a pending request."""
    callback_address: Optional[str]
    generation: int


@dataclass
class GateRequestState:
    """
    The single outstanding gate request.

    Invariant: when ``pending`` is False, ``callback_address`` is None.
    ``generation`` counts triggers and never goes backwards.
    """
    pending: bool = False
    callback_address: Optional[str] = None
    generation: int = 0

    def arm(self, callback_address: Optional[str]) -> int:
        """Mark the gate as expected to open, replacing any earlier request.

        Returns the generation number of this trigger.
        """
        self.pending = True
        self.callback_address = callback_address or None
        self.generation += 1
        return self.generation

    def resolve(self) -> Optional[Resolution]:
        """Clear the pending request.

        Returns None when nothing was pending, so a second resolution
        is a no-op.
        """
        if not self.pending:
            self.callback_address = None
            return None

        resolution = Resolution(
            callback_address=self.callback_address,
            generation=self.generation,
        )
        self.pending = False
        self.callback_address = None
        return resolution

    def is_current(self, generation: int) -> bool:
        return generation == self.generation
