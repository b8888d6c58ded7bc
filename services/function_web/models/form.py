"""
Form request model.

Merges query parameters with an urlencoded form body into the single
payload used when a request carries no body.
"""

from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, Field


class FormRequest(BaseModel):
    params: Dict[str, List[str]] = Field(default_factory=dict)

    @classmethod
    def from_params(cls, *sources: Mapping[str, List[str]]) -> "FormRequest":
        merged: Dict[str, List[str]] = {}
        for source in sources:
            for key, values in source.items():
                merged.setdefault(key, []).extend(values)
        return cls(params=merged)

    def is_empty(self) -> bool:
        return not self.params

    def payload(self) -> Dict[str, Any]:
        """One-element value lists collapse to the value itself."""
        return {
            key: values[0] if len(values) == 1 else list(values)
            for key, values in self.params.items()
        }
