"""Request and response models for sections (camelCase on the wire)."""

from typing import Annotated, Any, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from wikitree.exceptions import ValidationError
from wikitree.schemas.content import ContentBlockType, to_validation_error

Position = Annotated[int, Field(strict=True, ge=0)]

ModelT = TypeVar("ModelT", bound=BaseModel)


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class SectionCreate(WireModel):
    """Body of ``POST /sections``."""

    id: str = Field(min_length=1)
    title: str = Field(min_length=1)
    summary: Optional[str] = None
    parent_id: Optional[str] = None
    position: Optional[Position] = None
    content: Optional[list[ContentBlockType]] = None


class SectionUpdate(WireModel):
    """Body of ``PATCH /sections/{id}``.

    ``parentId: null`` moves the section to the root level, while an absent
    ``parentId`` leaves the parent untouched; use ``model_fields_set`` to tell
    the two apart. ``title`` and ``summary`` may be omitted but not set to
    null.
    """

    title: Optional[str] = Field(default=None, min_length=1)
    summary: Optional[str] = None
    parent_id: Optional[str] = None
    position: Optional[Position] = None
    content: Optional[list[ContentBlockType]] = None

    @field_validator("title", "summary", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise PydanticCustomError("null_not_allowed", "must not be null")
        return value


class SectionView(WireModel):
    """Assembled, externally visible section.

    ``content`` is absent when the section has no blocks and ``children`` is
    absent for leaves.
    """

    id: str
    title: str
    summary: Optional[str] = None
    added_at: Optional[str] = None
    updated_at: Optional[str] = None
    content: Optional[list[ContentBlockType]] = None
    children: Optional[list["SectionView"]] = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


SectionView.model_rebuild()


class TimelineEntry(WireModel):
    """A leaf as listed in the change timeline, with the root it belongs to."""

    slug: list[str]
    id: str
    title: str
    summary: Optional[str] = None
    added_at: Optional[str] = None
    updated_at: Optional[str] = None
    root_id: str
    root_title: str

    @property
    def effective_date(self) -> Optional[str]:
        return self.updated_at or self.added_at

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def validate_payload(model: Type[ModelT], payload: Any) -> ModelT:
    """
    Validate an untyped request body against a request model.

    Raises:
        ValidationError: If the body is not an object or does not match the model
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object", "body")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise to_validation_error(e) from e
