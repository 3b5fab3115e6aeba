from typing import Optional


class BootstrapError(Exception):
    """
    Base type of all errors raised while handling a lifecycle event. Any of them fails the whole event.
    """

    code: str = "BootstrapError"

    def __init__(self, message: str = None):
        self.message = message or self.code
        super().__init__(self.message)

    def __str__(self):
        return f"{self.code}: {self.message}"


class ValidationError(BootstrapError):
    """Required resource properties are missing, malformed, or mutually exclusive. Raised before any mutation."""

    code = "ValidationError"


class ExternalServiceError(BootstrapError):
    """A call to an external service (submit, status, connect, query, ...) itself failed."""

    code = "ExternalServiceError"


class ExternalOperationFailed(BootstrapError):
    """An asynchronous operation on an external engine reached a non-success terminal state."""

    code = "ExternalOperationFailed"

    def __init__(self, terminal_state: str, operation_id: Optional[str] = None, message: str = None):
        self.terminal_state = terminal_state
        self.operation_id = operation_id
        message = message or (
            f"Operation {operation_id} entered non-success state '{terminal_state}'"
        )
        super().__init__(message)


class PollTimeout(BootstrapError):
    """An asynchronous operation did not reach a terminal state within the maximum wait time."""

    code = "PollTimeout"

    def __init__(self, elapsed: float, operation_id: Optional[str] = None, message: str = None):
        self.elapsed = elapsed
        self.operation_id = operation_id
        message = message or (
            f"Operation {operation_id} did not complete after waiting ~{elapsed:g}s"
        )
        super().__init__(message)


class UnknownResourceType(BootstrapError):
    """No handler is registered for the resource type of a Create or Update event."""

    code = "UnknownResourceType"

    def __init__(self, resource_type: str, known_types=None):
        self.resource_type = resource_type
        message = f"Unexpected ResourceType '{resource_type}'"
        if known_types:
            message += f" not in {sorted(known_types)}"
        super().__init__(message)
