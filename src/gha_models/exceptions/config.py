from __future__ import annotations

from typing import Any

from gha_models.exceptions.base import GhaModelsError


class ConfigError(GhaModelsError):
    """Exception for settings loading, parsing, and validation errors.

    Raised when parser settings cannot be loaded or validated. This includes
    YAML parsing failures in a settings file, pydantic validation errors, and
    invalid environment variable values.

    Attributes:
        message: Human-readable error message describing the configuration issue.
        field: Optional field name that caused the error (e.g., "max_depth").
        value: Optional value that failed validation (for debugging).

    Examples:
        ```python
        raise ConfigError(
            "Invalid settings value",
            field="unknown_keys",
            value="explode",
        )
        ```
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        """Initialize the ConfigError.

        Args:
            message: Human-readable error message.
            field: Optional field name that caused the error.
            value: Optional value that failed validation.
        """
        self.field = field
        self.value = value
        super().__init__(message)
