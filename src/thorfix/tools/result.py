"""Result payload returned to the calling agent for every tool call."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Text response handed back to the model, flagged when it describes a failure."""

    response: str
    is_error: bool = False

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(response=message, is_error=True)

    def to_dict(self) -> dict[str, Any]:
        return {"response": self.response, "is_error": self.is_error}
