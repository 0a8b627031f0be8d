"""Value types exchanged between the MCP binding and the tool registry."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: Mapping[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape for a tool list entry; the schema is a fresh copy."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": copy.deepcopy(dict(self.input_schema)),
        }


@dataclass(frozen=True)
class ToolCallRequest:
    name: str
    arguments: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TextContent:
    text: str
    type: str = "text"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ToolCallResult:
    """Result envelope returned for every call, success or failure.

    ``error`` holds the structured failure payload (exception type, category,
    status code). It is kept for logs and callers inside the process; the host
    only sees ``content`` and ``is_error``.
    """

    content: Tuple[TextContent, ...]
    is_error: bool = False
    error: Optional[Mapping[str, Any]] = None

    @classmethod
    def text_result(cls, text: str) -> "ToolCallResult":
        return cls(content=(TextContent(text=text),))

    @classmethod
    def error_result(cls, text: str, *, error: Optional[Mapping[str, Any]] = None) -> "ToolCallResult":
        return cls(content=(TextContent(text=text),), is_error=True, error=error)

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": [block.to_dict() for block in self.content],
            "isError": self.is_error,
        }


__all__ = ["TextContent", "ToolCallRequest", "ToolCallResult", "ToolDescriptor"]
