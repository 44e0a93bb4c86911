"""Shared pytest fixtures and test utilities for wiki tree tests."""

import os
import tempfile
from typing import Any, Generator, Optional

import pytest

from wikitree.schemas.section import SectionView
from wikitree.services.events import TreeChangeEvent, TreeEvents
from wikitree.services.section_service import SectionService
from wikitree.storage.database import Database, reset_db


@pytest.fixture(scope="function")
def temp_db() -> Generator[Database, None, None]:
    """
    Create a temporary SQLite database for testing.

    Yields:
        Database instance with tables created
    """
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    reset_db()

    database = Database(f"sqlite:///{db_path}")
    database.create_tables()

    yield database

    database.drop_tables()
    database.dispose()
    reset_db()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def db_session(temp_db):
    """Get a database session from temp_db."""
    with temp_db.session() as session:
        yield session


@pytest.fixture
def tree_events():
    """A tree change hub that records every event it delivers."""
    events = TreeEvents()
    events.received = []
    events.subscribe(events.received.append)
    return events


@pytest.fixture
def section_service(temp_db, tree_events):
    """Create a section service instance wired to the recording hub."""
    with temp_db.session() as session:
        yield SectionService(session, tree_events)


@pytest.fixture
def docs_tree(section_service):
    """
    A small documentation site.

    getting-started
      install (leaf, one paragraph)
      configure (leaf, no content)
    reference
      api
        endpoints (leaf, code block)
    """
    service = section_service
    service.create_section("getting-started", "Getting Started")
    service.create_section(
        "install",
        "Install",
        parent_id="getting-started",
        content=[BlockFactory.paragraph("pip install wikitree")],
    )
    service.create_section("configure", "Configure", parent_id="getting-started")
    service.create_section("reference", "Reference", summary="All the details")
    service.create_section("api", "API", parent_id="reference")
    service.create_section(
        "endpoints",
        "Endpoints",
        parent_id="api",
        content=[BlockFactory.code("GET /sections", language="http")],
    )
    return service


class BlockFactory:
    """Raw (wire form) content block descriptions."""

    @staticmethod
    def paragraph(text: str = "Hello", **extra: Any) -> dict:
        return {"type": "paragraph", "text": text, **extra}

    @staticmethod
    def bullet_list(*items: Any, title: Optional[str] = None) -> dict:
        block: dict[str, Any] = {"type": "list", "items": list(items) or ["one"]}
        if title is not None:
            block["title"] = title
        return block

    @staticmethod
    def code(value: str = "print('hi')", language: Optional[str] = None) -> dict:
        block: dict[str, Any] = {"type": "code", "value": value}
        if language is not None:
            block["language"] = language
        return block

    @staticmethod
    def image(src: str = "https://example.com/diagram.png", alt: str = "Diagram") -> dict:
        return {"type": "image", "src": src, "alt": alt}

    @staticmethod
    def video(youtube_id: str = "dQw4w9WgXcQ") -> dict:
        return {"type": "video", "youtubeId": youtube_id}


class AssertionHelpers:
    """Helper functions for test assertions."""

    @staticmethod
    def tree_shape(sections: list[SectionView]) -> list:
        """Reduce an assembled tree to nested ``(id, [children...])`` pairs."""
        return [(s.id, AssertionHelpers.tree_shape(s.children or [])) for s in sections]

    @staticmethod
    def all_ids(sections: list[SectionView]) -> set[str]:
        """Every section ID anywhere in an assembled tree."""
        ids = set()
        stack = list(sections)
        while stack:
            section = stack.pop()
            ids.add(section.id)
            stack.extend(section.children or [])
        return ids

    @staticmethod
    def event_kinds(events: list[TreeChangeEvent]) -> list[str]:
        return [event.kind.value for event in events]


@pytest.fixture
def block_factory():
    """Provide BlockFactory."""
    return BlockFactory


@pytest.fixture
def assertion_helpers():
    """Provide AssertionHelpers."""
    return AssertionHelpers
