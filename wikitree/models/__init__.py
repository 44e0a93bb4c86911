"""Database models for Wiki-Tree."""

from wikitree.models.base import Base
from wikitree.models.content_block import ContentBlock
from wikitree.models.section import Section

__all__ = ["Base", "Section", "ContentBlock"]
