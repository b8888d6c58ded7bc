"""
FunctionTarget model.

Data class representing the result of routing resolution.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class FunctionTarget(BaseModel):
    """
    Callables resolved by routing for one request.

    At most one of function/consumer/supplier is normally set; an empty
    target is rejected by the controller.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    function: Optional[Any] = None
    consumer: Optional[Any] = None
    supplier: Optional[Any] = None
    argument: Optional[str] = None

    @property
    def handler(self) -> Optional[Any]:
        return self.function or self.consumer or self.supplier
