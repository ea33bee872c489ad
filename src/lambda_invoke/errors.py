"""
Error types raised by the invoke pipeline.
"""


class InvokeError(Exception):
    """Base class for errors raised by lambda-invoke."""


class ConfigurationError(InvokeError):
    """
    The service configuration cannot satisfy the request: unknown function,
    missing service root or malformed function metadata.
    """


class InvocationFailedError(InvokeError):
    """The remote function ran but reported a runtime failure."""

    def __init__(self, message: str = "Invoked function failed"):
        super().__init__(message)
