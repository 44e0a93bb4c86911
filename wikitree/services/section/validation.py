"""Section validation logic."""

from wikitree.exceptions import ValidationError


class SectionValidator:
    """Validates section data according to business rules."""

    # Validation constants
    TITLE_MIN_LENGTH = 1
    TITLE_MAX_LENGTH = 500
    ID_MAX_LENGTH = 255

    @staticmethod
    def validate_title(title: str) -> None:
        """
        Validate section title.

        Args:
            title: Title to validate

        Raises:
            ValidationError: If title is invalid
        """
        if not isinstance(title, str):
            raise ValidationError("Title must be a string", "title")
        if not title or not title.strip():
            raise ValidationError("Title is required and cannot be empty", "title")
        if len(title) > SectionValidator.TITLE_MAX_LENGTH:
            raise ValidationError(
                f"Title must be at most {SectionValidator.TITLE_MAX_LENGTH} characters", "title"
            )

    @staticmethod
    def validate_id(section_id: str, field: str = "id") -> None:
        """
        Validate a section ID (or a reference to one).

        Args:
            section_id: Section ID to validate
            field: Field name reported on failure

        Raises:
            ValidationError: If section_id is invalid
        """
        if not isinstance(section_id, str):
            raise ValidationError("Section ID must be a string", field)
        if not section_id or not section_id.strip():
            raise ValidationError("Section ID cannot be empty", field)
        if len(section_id) > SectionValidator.ID_MAX_LENGTH:
            raise ValidationError(
                f"Section ID must be at most {SectionValidator.ID_MAX_LENGTH} characters", field
            )

    @staticmethod
    def is_storable_id(section_id: str) -> bool:
        """Whether a section with this ID could exist at all."""
        return (
            isinstance(section_id, str)
            and bool(section_id.strip())
            and len(section_id) <= SectionValidator.ID_MAX_LENGTH
        )

    @staticmethod
    def validate_summary(summary: str) -> None:
        """
        Validate section summary.

        Raises:
            ValidationError: If summary is not a string
        """
        if not isinstance(summary, str):
            raise ValidationError("Summary must be a string", "summary")

    @staticmethod
    def validate_position(position: int) -> None:
        """
        Validate a sibling position.

        Raises:
            ValidationError: If position is not a non-negative integer
        """
        # bool is an int subclass
        if isinstance(position, bool) or not isinstance(position, int):
            raise ValidationError("Position must be an integer", "position")
        if position < 0:
            raise ValidationError("Position must be non-negative", "position")
