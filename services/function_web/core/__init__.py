"""
Core logic package.

Provides the exception hierarchy and JSON conversion shared by services.
"""

from .exceptions import (
    CloudEventValidationError,
    FunctionInvocationError,
    FunctionNotFoundError,
    FunctionRegistrationError,
    InputConversionError,
    InvalidInvocationError,
)
from .json_mapper import JsonMapper, StringConverter

__all__ = [
    "CloudEventValidationError",
    "FunctionInvocationError",
    "FunctionNotFoundError",
    "FunctionRegistrationError",
    "InputConversionError",
    "InvalidInvocationError",
    "JsonMapper",
    "StringConverter",
]
