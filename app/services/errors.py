class RecipeGenerationError(RuntimeError):
    error_class = "unknown"

    def __init__(self, message: str, error_class: str | None = None) -> None:
        super().__init__(message)
        if error_class is not None:
            self.error_class = error_class


class RecipeValidationError(RecipeGenerationError):
    error_class = "validation"

    def __init__(self, field: str) -> None:
        super().__init__(f"Recipe is missing required field: {field}")
        self.field = field


class CompletionTimeoutError(RecipeGenerationError, TimeoutError):
    error_class = "timeout"


class UpstreamError(RecipeGenerationError):
    error_class = "upstream"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(RecipeGenerationError):
    error_class = "malformed_response"
