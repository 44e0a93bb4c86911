"""Custom exceptions for section tree operations."""


class WikiServiceError(Exception):
    """Base exception for wiki service errors."""

    kind = "unexpected_error"


class ValidationError(WikiServiceError):
    """Raised when input validation fails."""

    kind = "validation_error"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[dict[str, str]] | None = None,
    ):
        super().__init__(message)
        self.field = field
        self.errors = errors or []


class NotFoundError(WikiServiceError):
    """Raised when a section is not found."""

    kind = "not_found"

    def __init__(self, resource_type: str, resource_id: str):
        message = f"{resource_type} with ID '{resource_id}' not found"
        super().__init__(message)
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(WikiServiceError):
    """Raised when attempting to create a resource that already exists."""

    kind = "conflict"

    def __init__(self, resource_type: str, field: str, value: str):
        message = f"{resource_type} with {field} '{value}' already exists"
        super().__init__(message)
        self.resource_type = resource_type
        self.field = field
        self.value = value


class InvalidHierarchyError(WikiServiceError):
    """Raised when an operation would break leaf/content exclusivity or create a cycle."""

    kind = "invalid_hierarchy"

    def __init__(self, message: str, section_id: str | None = None):
        super().__init__(message)
        self.section_id = section_id


class DatabaseError(WikiServiceError):
    """Raised when a database operation fails."""

    kind = "unexpected_error"

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error
