"""Content block schema.

Defines the five block variants a leaf section can hold and turns untyped
input into canonical blocks. Wire names are camelCase (``youtubeId``,
``fontSize``); Python attributes are snake_case.

Validation failures are reported as :class:`wikitree.exceptions.ValidationError`
with a dotted field path and a readable constraint, for example
``"image.src must be an absolute URL"``.
"""

from typing import Annotated, Any, Iterable, Literal, Union

from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from wikitree.exceptions import ValidationError

BLOCK_TYPES = ("paragraph", "list", "code", "image", "video")

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _absolute_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except PydanticValidationError:
        raise PydanticCustomError("absolute_url", "must be an absolute URL") from None
    return value


NonEmptyStr = Annotated[str, Field(min_length=1)]
AbsoluteUrl = Annotated[str, AfterValidator(_absolute_url)]


class BlockModel(BaseModel):
    """Base for block models: camelCase aliases, unknown keys dropped."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class TextStyle(BlockModel):
    font_size: Literal["sm", "base", "lg", "xl"] | None = None
    font_weight: Literal["normal", "medium", "semibold", "bold"] | None = None
    accent: bool | None = None
    highlight: bool | None = None


class ListItem(BlockModel):
    text: NonEmptyStr
    style: TextStyle | None = None


class ParagraphBlock(BlockModel):
    type: Literal["paragraph"]
    text: NonEmptyStr
    style: TextStyle | None = None


class ListBlock(BlockModel):
    type: Literal["list"]
    title: str | None = None
    items: list[ListItem] = Field(min_length=1)

    @field_validator("items", mode="before")
    @classmethod
    def _normalize_items(cls, value: Any) -> Any:
        # Bare strings are shorthand for an unstyled item.
        if isinstance(value, list):
            return [{"text": item} if isinstance(item, str) else item for item in value]
        return value


class CodeBlock(BlockModel):
    type: Literal["code"]
    title: str | None = None
    language: str | None = None
    value: NonEmptyStr


class ImageBlock(BlockModel):
    type: Literal["image"]
    alt: NonEmptyStr
    src: AbsoluteUrl
    caption: str | None = None


class VideoBlock(BlockModel):
    type: Literal["video"]
    title: str | None = None
    youtube_id: NonEmptyStr


ContentBlockType = Annotated[
    Union[ParagraphBlock, ListBlock, CodeBlock, ImageBlock, VideoBlock],
    Field(discriminator="type"),
]

_BLOCK_ADAPTER = TypeAdapter(ContentBlockType)
_CONTENT_ADAPTER = TypeAdapter(list[ContentBlockType])

_ERROR_MESSAGES = {
    "missing": "is required",
    "string_too_short": "must not be empty",
    "too_short": "must contain at least one entry",
    "string_type": "must be a string",
    "bool_type": "must be a boolean",
    "list_type": "must be a list",
    "model_type": "must be an object",
    "model_attributes_type": "must be an object",
    "dict_type": "must be an object",
}


def _describe(error: dict[str, Any]) -> str:
    error_type = error["type"]
    if error_type == "union_tag_invalid":
        return f"must be one of {', '.join(BLOCK_TYPES)}"
    if error_type == "union_tag_not_found":
        return "is required"
    if error_type == "literal_error":
        return f"must be one of {error['ctx']['expected']}"
    return _ERROR_MESSAGES.get(error_type, error["msg"])


def describe_errors(
    exc: PydanticValidationError, prefix: Iterable[str | int] = ()
) -> list[dict[str, str]]:
    """
    Flatten a pydantic error into field-addressed messages.

    Args:
        exc: Pydantic validation error
        prefix: Location prepended to every error path

    Returns:
        List of ``{"field": ..., "message": ...}`` entries
    """
    described = []
    for error in exc.errors():
        loc = (*prefix, *error["loc"])
        if error["type"] in ("union_tag_invalid", "union_tag_not_found"):
            loc = (*loc, "type")
        field = ".".join(str(part) for part in loc)
        text = _describe(error)
        described.append({"field": field, "message": f"{field} {text}" if field else text})
    return described


def to_validation_error(
    exc: PydanticValidationError, prefix: Iterable[str | int] = ()
) -> ValidationError:
    """Convert a pydantic error into a service ValidationError (first error is the headline)."""
    errors = describe_errors(exc, prefix)
    first = errors[0] if errors else {"field": None, "message": "Invalid input"}
    return ValidationError(first["message"], first["field"], errors)


def parse_content_block(raw: Any) -> ContentBlockType:
    """
    Validate one untyped block description.

    Raises:
        ValidationError: If the block does not match any variant
    """
    try:
        return _BLOCK_ADAPTER.validate_python(raw)
    except PydanticValidationError as e:
        raise to_validation_error(e) from e


def parse_content(raw: Any) -> list[ContentBlockType]:
    """
    Validate a sequence of untyped block descriptions.

    Error paths are prefixed with ``content`` and the block index,
    e.g. ``content.1.image.src``.

    Raises:
        ValidationError: If any block is invalid
    """
    try:
        return _CONTENT_ADAPTER.validate_python(raw)
    except PydanticValidationError as e:
        raise to_validation_error(e, prefix=("content",)) from e


def dump_block(block: ContentBlockType) -> dict[str, Any]:
    """External (wire) representation of a block, type included."""
    return block.model_dump(mode="json", by_alias=True, exclude_none=True)


def block_payload(block: ContentBlockType) -> dict[str, Any]:
    """Persisted payload of a block: every field except the type tag."""
    return block.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"type"})


def block_from_row(block_type: str, payload: dict[str, Any] | None) -> ContentBlockType:
    """Rebuild a canonical block from a stored type and payload."""
    return _BLOCK_ADAPTER.validate_python({**(payload or {}), "type": block_type})
