"""Refresh noise classification for snapshot diffs.

An element that re-renders with new text shows up as one removed line (old
text) and one added line (new text) with the same role and stable id. Such
pairs are cancelled; everything else in ``added`` is genuinely new.
"""

import logging
from collections import Counter

from .types import AXDiff, FIELD_SEPARATOR, STABLE_ID_KEY

logger = logging.getLogger(__name__)

_STABLE_ID_PREFIX = STABLE_ID_KEY + "="


def skeleton(line: str) -> str:
    """Return the stable identity key ``role|d=<id>`` of a line.

    Returns an empty string when the line has no ``d=`` field.
    """
    fields = line.split(FIELD_SEPARATOR)
    role = fields[0]
    for item in fields[1:]:
        if item.startswith(_STABLE_ID_PREFIX):
            return role + FIELD_SEPARATOR + item
    return ""


def filter_genuine(diff: AXDiff) -> list[str]:
    """Drop added lines that are text refreshes of a removed element.

    Args:
        diff: Raw diff between two snapshots.

    Returns:
        Added lines that carry new information, in their original order.
    """
    removed_skeletons = Counter(
        key for key in (skeleton(line) for line in diff.removed) if key
    )

    genuine: list[str] = []
    for line in diff.added:
        key = skeleton(line)
        if key and removed_skeletons[key] > 0:
            removed_skeletons[key] -= 1
            continue
        genuine.append(line)

    dropped = len(diff.added) - len(genuine)
    if dropped:
        logger.debug(
            "Cancelled %d refresh line(s), %d genuine", dropped, len(genuine)
        )

    return genuine
