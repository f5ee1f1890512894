"""Accessibility snapshot and diff types."""

from dataclasses import dataclass, field

# Field delimiter inside a snapshot line
FIELD_SEPARATOR = "|"

# Reserved key carrying the OS-assigned stable element identifier
STABLE_ID_KEY = "d"


@dataclass(frozen=True)
class AXSnapshot:
    """Flattened accessibility tree of the foreground application."""

    app_name: str
    bundle_id: str
    lines: tuple[str, ...]  # e.g. "Button|t=Send|d=sendBtn"


@dataclass
class AXDiff:
    """Multiset difference between two snapshots' lines."""

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True if the two snapshots held the same lines."""
        return not self.added and not self.removed
