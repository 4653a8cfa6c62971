"""
Errors raised by the sandbox, and the error/value type vocabularies drivers report with.
"""
from enum import Enum


class SandboxError(Exception):
    """
    Base class for errors raised by the sandbox emulator.
    """


class InvalidArgumentError(SandboxError, ValueError):
    """
    Raised when a required field is missing or has the wrong type.
    """


class SizeExceededError(SandboxError, ValueError):
    """
    Raised when a payload is larger than the host accepts.
    """


class ErrorType(Enum):
    """ Known driver failure types. The value is the description shown when the failure is reported. """
    MISSING_DEVICE_ERROR = "No device was found for execution"
    RESOURCE_UNAVAILABLE = "The Resource you are trying to access is not available"
    AUTHENTICATION_ERROR = "Authentication with the device has failed"
    PARSING_ERROR = "Failed to parse the response"
    TIMEOUT_ERROR = "The remote call has resulted in a timeout"
    IMPORT_NOT_ALLOWED = "Import statements are not allowed in the sandbox environment"
    REQUIRE_NOT_ALLOWED = "Require statements are not allowed in the sandbox environment"
    GENERIC_ERROR = "Generic/Unknown error has occurred"


class ValueType(Enum):
    """
    The type of a variable value, used by the host for visualization.

    RATE values only have their rate of change stored. MONOTONE_RATE is similar but
    ignores values lower than the previously collected one.
    """
    STRING = "STRING"
    NUMBER = "NUMBER"
    DATETIME = "DATETIME"
    RATE = "RATE"
    MONOTONE_RATE = "MONOTONE_RATE"


class DriverFailure(SandboxError):
    """
    Raised when a driver reports a failure and the sandbox aborts the run.
    """

    def __init__(self, error_type: ErrorType):
        super().__init__(error_type.value)
        self.error_type = error_type


def to_error_type(reported) -> ErrorType:
    """
    Maps whatever a driver reports as a failure onto an ErrorType: the type itself, its name or its
    description. Anything else is a GENERIC_ERROR.

    >>> to_error_type('TIMEOUT_ERROR')
    <ErrorType.TIMEOUT_ERROR: 'The remote call has resulted in a timeout'>
    >>> to_error_type(IOError('connection refused')).name
    'GENERIC_ERROR'
    """
    if isinstance(reported, ErrorType):
        return reported
    if isinstance(reported, str):
        if reported in ErrorType.__members__:
            return ErrorType[reported]
        for error_type in ErrorType:
            if error_type.value == reported:
                return error_type
    return ErrorType.GENERIC_ERROR
