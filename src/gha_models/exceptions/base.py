from __future__ import annotations


class GhaModelsError(Exception):
    """Base exception class for all gha-models errors.

    This is the root of the exception hierarchy. Catching it at a tool
    boundary (a linter's CLI, a scanner's worker) handles every failure this
    package raises while letting system exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            document = load_workflow(text).unwrap()
        except GhaModelsError as e:
            logger.error("workflow_rejected", error=e.message)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the GhaModelsError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
