"""
Data model definitions package.

Aggregates models for use in other modules.
"""

from .context import InputContext
from .form import FormRequest
from .function import FunctionEntity, FunctionKind, FunctionType, Wrapper
from .message import Message
from .target_function import FunctionTarget

__all__ = [
    "InputContext",
    "FormRequest",
    "FunctionEntity",
    "FunctionKind",
    "FunctionType",
    "Wrapper",
    "Message",
    "FunctionTarget",
]
