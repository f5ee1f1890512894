"""Accessibility snapshot capture, diffing and noise classification."""

from .types import AXDiff, AXSnapshot
from .diff import compute_diff
from .noise import filter_genuine, skeleton
from .capture import (
    AsyncProcessRunner,
    CommandSnapshotSource,
    SnapshotSource,
    UnavailableSnapshotSource,
    parse_capture_output,
)
from .watcher import SnapshotWatcher, WatchResult

__all__ = [
    "AXDiff",
    "AXSnapshot",
    "compute_diff",
    "filter_genuine",
    "skeleton",
    "AsyncProcessRunner",
    "CommandSnapshotSource",
    "SnapshotSource",
    "UnavailableSnapshotSource",
    "parse_capture_output",
    "SnapshotWatcher",
    "WatchResult",
]
