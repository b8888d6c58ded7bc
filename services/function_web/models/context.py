"""
Input context models.

Encapsulates all data required to process a function request.
"""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

EVENT_STREAM = "text/event-stream"


class InputContext(BaseModel):
    """
    Request-scoped context passed explicitly through the controller.

    This model decouples the service layer from FastAPI's Request object.
    """

    method: str
    path: str
    headers: List[Tuple[str, str]] = Field(default_factory=list)
    query_params: Dict[str, List[str]] = Field(default_factory=dict)
    form_params: Dict[str, List[str]] = Field(default_factory=dict)
    body: str = ""
    content_type: str = ""
    accept: str = ""
    request_id: Optional[str] = None

    @property
    def wants_event_stream(self) -> bool:
        return EVENT_STREAM in self.accept.lower()
