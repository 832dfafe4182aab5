from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class TextContent:
    text: str
    type: str = "text"

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ToolErrorInfo:
    code: str
    message: str


@dataclass(frozen=True)
class ToolCallResult:
    """Either a non-empty list of content blocks or a structured error, never both."""

    content: tuple[TextContent, ...] = field(default_factory=tuple)
    error: ToolErrorInfo | None = None

    def __post_init__(self) -> None:
        if self.error is None and not self.content:
            raise ValueError("A successful tool result needs at least one content block.")
        if self.error is not None and self.content:
            raise ValueError("A tool result cannot carry both content and an error.")

    @classmethod
    def ok(cls, *blocks: TextContent) -> ToolCallResult:
        return cls(content=tuple(blocks))

    @classmethod
    def text(cls, value: str) -> ToolCallResult:
        return cls.ok(TextContent(text=value))

    @classmethod
    def fail(cls, code: str, message: str) -> ToolCallResult:
        return cls(error=ToolErrorInfo(code=code, message=message))

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"content": [block.to_dict() for block in self.content]}
        if self.error is not None:
            out["error"] = {"code": self.error.code, "message": self.error.message}
        return out


class Tool(ABC):
    name: str

    @abstractmethod
    async def run(self, args: dict[str, Any]) -> ToolCallResult:
        raise NotImplementedError


def format_number(value: float) -> str:
    """Render a number the way JavaScript's ``String(n)`` does (5.0 -> "5", 1e-7 -> "1e-7")."""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    # repr gives the shortest round-tripping digits; only the layout differs from JS.
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(map(str, digit_tuple)).rstrip("0")
    exponent += len("".join(map(str, digit_tuple))) - len(digits)
    k = len(digits)
    n = exponent + k

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * (-n) + digits
    e = n - 1
    exp_text = f"e{'+' if e >= 0 else '-'}{abs(e)}"
    if k == 1:
        return sign + digits + exp_text
    return sign + digits[0] + "." + digits[1:] + exp_text
