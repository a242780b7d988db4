"""Exception definitions for delivery-tool"""

from ..constants import ErrorCode


class DeliveryToolError(Exception):
    """Base exception for delivery-tool"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class InternalError(DeliveryToolError):
    """Recoverable domain error

    Raised for malformed parameters, missing settings and similar problems.
    Computations turn it into inline error content.
    """

    def __init__(self, message: str, error_code: str = ErrorCode.INTERNAL_ERROR):
        super().__init__(message, error_code)


class InvalidParametersError(InternalError):
    """Assignment strategy received fewer parameters than it expects"""

    def __init__(self, strategy_name: str, expected: int, actual: int):
        message = (
            f"Assignment strategy '{strategy_name}' expects {expected} "
            f"parameter(s), got {actual}"
        )
        super().__init__(message, ErrorCode.INVALID_PARAMETERS)
        self.strategy_name = strategy_name
        self.expected = expected
        self.actual = actual


class VersionControlError(InternalError):
    """Version control collaborator reported a recoverable error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.VERSION_CONTROL_ERROR)


class ALMError(InternalError):
    """ALM (issue tracker) collaborator reported a recoverable error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.ALM_ERROR)


class NotFoundError(InternalError):
    """Named plugin, delivery or component not found"""

    def __init__(self, kind: str, name: str):
        super().__init__(f"{kind} not found: {name}", ErrorCode.NOT_FOUND)
        self.kind = kind
        self.name = name


class UnknownStrategyError(InternalError):
    """Persisted document references a plugin that is not registered"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.UNKNOWN_STRATEGY)


class PersistenceError(InternalError):
    """Project document could not be read or written"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.PERSISTENCE_ERROR)


class ConfigError(InternalError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class ProjectNotFoundError(InternalError):
    """Project root not found error"""

    def __init__(self, message: str = None):
        if message is None:
            message = (
                "No project root found. Please ensure:\n"
                "1. You are in a project directory\n"
                "2. The project root contains .delivery-tool.yaml\n"
                "3. Or use --project-root parameter to specify project location"
            )
        super().__init__(message, ErrorCode.PROJECT_NOT_FOUND)


class InternalRuntimeError(DeliveryToolError, RuntimeError):
    """Non-recoverable error

    Aborts the running computation and is surfaced to the user as a failure
    notice once control returns to the foreground.
    """

    def __init__(self, message: str, error_code: str = ErrorCode.INTERNAL_RUNTIME_ERROR):
        super().__init__(message, error_code)


class VersionControlRuntimeError(InternalRuntimeError):
    """Version control adapter failed fatally"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.VERSION_CONTROL_RUNTIME_ERROR)


class ALMRuntimeError(InternalRuntimeError):
    """ALM adapter failed fatally"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.ALM_RUNTIME_ERROR)


class DeliveryCreationError(InternalRuntimeError):
    """Background computation of a delivery failed"""

    def __init__(self, delivery_name: str, cause: BaseException):
        message = f"Delivery '{delivery_name}' could not be created: {cause}"
        super().__init__(message, ErrorCode.DELIVERY_CREATION_FAILED)
        self.delivery_name = delivery_name
        self.cause = cause
