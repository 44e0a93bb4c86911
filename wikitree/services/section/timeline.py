"""Leaf timeline: every readable page ordered by its last change."""

from datetime import date
from typing import Optional, Sequence

from wikitree.schemas.section import SectionView, TimelineEntry
from wikitree.services.section.navigation import collect_leaf_paths


def build_timeline(
    sections: Sequence[SectionView],
    root_id: Optional[str] = None,
    since: Optional[date] = None,
    until: Optional[date] = None,
) -> list[TimelineEntry]:
    """
    List the leaves of an assembled tree, most recently changed first.

    A leaf's date is its ``updatedAt``, falling back to ``addedAt``. Leaves
    without either date pass the date filters and sort last. Ties keep
    reading order.

    Args:
        sections: Root-level sections
        root_id: Only keep leaves under this root section
        since: Only keep leaves dated on or after this day
        until: Only keep leaves dated on or before this day

    Returns:
        Timeline entries
    """
    roots = {section.id: section for section in sections}
    lower = since.isoformat() if since else None
    upper = until.isoformat() if until else None

    entries = []
    for path, leaf in collect_leaf_paths(sections):
        if root_id is not None and path[0] != root_id:
            continue
        entry = TimelineEntry(
            slug=path,
            id=leaf.id,
            title=leaf.title,
            summary=leaf.summary,
            added_at=leaf.added_at,
            updated_at=leaf.updated_at,
            root_id=path[0],
            root_title=roots[path[0]].title,
        )
        effective = entry.effective_date
        if effective is not None:
            if lower is not None and effective < lower:
                continue
            if upper is not None and effective > upper:
                continue
        entries.append(entry)

    # Dates are YYYY-MM-DD, so string order is date order.
    entries.sort(key=lambda entry: entry.effective_date or "", reverse=True)
    return entries
