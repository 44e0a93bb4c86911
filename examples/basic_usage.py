"""Basic usage example for the wiki section tree."""

import json

from wikitree.services import SectionService, TreeEvents, log_tree_change
from wikitree.storage import Database


def main():
    """Build a small documentation tree, restructure it, and print the result."""
    # Initialize database (uses SQLite by default)
    db = Database()
    db.create_tables()

    events = TreeEvents()
    events.subscribe(log_tree_change)

    with db.session() as session:
        service = SectionService(session, events)

        service.create_section("guide", "Guide", summary="Start here")
        service.create_section(
            "guide-install",
            "Installation",
            parent_id="guide",
            content=[
                {"type": "paragraph", "text": "Install the package with pip."},
                {"type": "code", "value": "pip install wikitree", "language": "bash"},
            ],
        )
        service.create_section("guide-usage", "Usage", parent_id="guide")
        service.create_section("reference", "Reference")
        print("Created 4 sections")

        # Move a page and replace its content
        service.update_section("guide-usage", parent_id="reference")
        service.update_section(
            "guide-usage",
            content=[{"type": "list", "title": "Commands", "items": ["serve", "migrate"]}],
        )

        tree = service.list_sections()
        print(json.dumps([section.to_dict() for section in tree], indent=2))
        print(f"Home page: /{'/'.join(service.landing_path(tree))}")

        for entry in service.timeline():
            print(f"{entry.effective_date}  /{'/'.join(entry.slug)}  ({entry.root_title})")

        removed = service.delete_section("guide")
        print(f"Deleted: {', '.join(removed)}")


if __name__ == "__main__":
    main()
