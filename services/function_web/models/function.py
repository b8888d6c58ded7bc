"""
Function domain models.

Describes a cataloged callable: its kind (function, consumer, supplier) and
the input/output type descriptors resolved once at registration time.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class FunctionKind(str, Enum):
    FUNCTION = "function"
    CONSUMER = "consumer"
    SUPPLIER = "supplier"


class Wrapper(str, Enum):
    """How values travel in or out of a callable."""

    PLAIN = "plain"  # a bare value
    OPTIONAL = "optional"  # a value or None
    MONO = "mono"  # a single deferred value (awaitable)
    FLUX = "flux"  # an async stream of values


class FunctionType(BaseModel):
    """
    Type descriptor of a registered callable.

    ``input_type``/``output_type`` are the item annotations once the wrapper
    and any ``Message[...]`` envelope have been peeled off.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    kind: FunctionKind
    input_type: Any = Field(default_factory=lambda: Any)
    input_wrapper: Wrapper = Wrapper.PLAIN
    input_is_message: bool = False
    output_type: Any = Field(default_factory=lambda: Any)
    output_wrapper: Wrapper = Wrapper.PLAIN
    output_is_message: bool = False

    @property
    def reactive(self) -> bool:
        """True when the callable receives the whole input stream at once."""
        return self.input_wrapper is Wrapper.FLUX


class FunctionEntity(BaseModel):
    """
    Function entry declared in functions.yml.
    """

    name: str
    handler: str
    kind: Optional[FunctionKind] = None

    @classmethod
    def from_dict(cls, name: str, data: Any) -> "FunctionEntity":
        """Factory to create from registry dict (a bare string is the handler)."""
        if isinstance(data, str):
            return cls(name=name, handler=data)
        data = dict(data or {})
        return cls(name=name, handler=data.get("handler", ""), kind=data.get("kind"))

    def describe(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
