"""Tree change notifications.

Every successful create, update or delete emits a :class:`TreeChangeEvent`.
Callers subscribe listeners to invalidate whatever rendering of the tree
they cache; the engine itself caches nothing.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from wikitree.models.base import utc_now

logger = logging.getLogger(__name__)


class TreeChangeKind(str, Enum):
    """Kind of mutation that changed the tree."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class TreeChangeEvent:
    """One committed mutation of the tree.

    Fields:
        kind: What happened
        section_ids: Sections affected (for deletes, the whole removed subtree)
        timestamp: ISO format timestamp of the notification
    """

    kind: TreeChangeKind
    section_ids: tuple[str, ...]
    timestamp: str = field(default_factory=lambda: utc_now().isoformat())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind.value,
            "sectionIds": list(self.section_ids),
            "timestamp": self.timestamp,
        }


TreeChangeListener = Callable[[TreeChangeEvent], None]


class TreeEvents:
    """Fan-out of tree change events to registered listeners."""

    def __init__(self) -> None:
        self._listeners: list[TreeChangeListener] = []

    def subscribe(self, listener: TreeChangeListener) -> TreeChangeListener:
        """Register a listener. Returns it so it can be used as a decorator."""
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: TreeChangeListener) -> None:
        """Remove a previously registered listener."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: TreeChangeEvent) -> None:
        """
        Deliver an event to every listener.

        The mutation is already committed when this runs, so a failing
        listener is logged and the remaining listeners still get the event.
        """
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Tree change listener %r failed for %s", listener, event.kind.value)


def log_tree_change(event: TreeChangeEvent) -> None:
    """Default listener: record the change in the log."""
    logger.info("Tree changed (%s): %s", event.kind.value, ", ".join(event.section_ids))
