class ToolError(Exception):
    """Base class for failures a tool reports back to the model."""

    code = "tool_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ToolError, ValueError):
    code = "validation_error"


class NotAuthenticated(ToolError):
    code = "not_authenticated"

    def __init__(self, message: str = "You need to be signed in to do that.") -> None:
        super().__init__(message)


class ExternalProviderError(ToolError):
    code = "external_provider_error"

    def __init__(self, provider: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{provider} request failed: {message}")
        self.provider = provider
        self.status_code = status_code


class PersistenceConflict(ToolError):
    code = "persistence_conflict"
