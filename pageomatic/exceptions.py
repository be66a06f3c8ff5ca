"""Custom exceptions for page composition and persistence."""


class PageServiceError(Exception):
    """Base exception for page service errors."""

    pass


class ValidationError(PageServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class NotFoundError(PageServiceError):
    """Raised when a resource is not found."""

    def __init__(self, resource_type: str, resource_id: str):
        message = f"{resource_type} with ID '{resource_id}' not found"
        super().__init__(message)
        self.resource_type = resource_type
        self.resource_id = resource_id


class DatabaseError(PageServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class UnknownSectionTypeError(ValidationError):
    """Raised when a section type tag is not in the registry."""

    def __init__(self, section_type: str):
        super().__init__(f"Unknown section type '{section_type}'", "type")
        self.section_type = section_type


class MissingActorError(PageServiceError):
    """Raised when a save is attempted without an acting user."""

    def __init__(self, page_slug: str):
        super().__init__(f"Cannot save page '{page_slug}' without an acting user")
        self.page_slug = page_slug


class ComponentSaveFailedError(PageServiceError):
    """Raised (or collected) when one named component fails to save."""

    def __init__(self, component_type: str, message: str, original_error: Exception | None = None):
        super().__init__(f"Failed to save component '{component_type}': {message}")
        self.component_type = component_type
        self.original_error = original_error


class ConflictError(ComponentSaveFailedError):
    """Raised when a component was modified since the version the caller last saw."""

    def __init__(self, component_type: str, expected_version: int, actual_version: int):
        super().__init__(
            component_type,
            f"expected version {expected_version}, found {actual_version}",
        )
        self.expected_version = expected_version
        self.actual_version = actual_version


class LoadFailedError(PageServiceError):
    """Raised when a page cannot be read back from the store."""

    def __init__(self, page_slug: str, original_error: Exception | None = None):
        super().__init__(f"Failed to load page '{page_slug}'")
        self.page_slug = page_slug
        self.original_error = original_error


class EditNotAllowedError(PageServiceError):
    """Raised when a mutation is attempted outside of edit mode."""

    pass
