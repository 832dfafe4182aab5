from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any
from urllib import parse as urlparse

from firecrawlagent.errors import DuplicateToolError, InvalidArgumentError, UnknownToolError
from .base import Tool, ToolCallResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    tool: Tool
    schema: dict[str, object]

    def validate_args(self, args: dict[str, Any] | None) -> dict[str, Any]:
        if args is None:
            args = {}
        if not isinstance(args, dict):
            raise InvalidArgumentError(f"Tool '{self.name}' args must be an object.")

        properties = self.schema.get("properties")
        if not isinstance(properties, dict):
            properties = {}

        required = self.schema.get("required")
        required_fields = required if isinstance(required, list) else []
        for field in required_fields:
            if not isinstance(field, str):
                continue
            if args.get(field) is None:
                raise InvalidArgumentError(
                    f"Tool '{self.name}' missing required arg '{field}'.", field=field
                )

        clean: dict[str, Any] = {}
        for key, value in args.items():
            prop = properties.get(key)
            if not isinstance(prop, dict):
                continue
            if value is None and key not in required_fields:
                continue
            clean[key] = _check_value(self.name, key, prop, value)
        return clean

    def describe(self) -> dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.schema,
        }


def _check_value(tool_name: str, key: str, prop: dict[str, object], value: Any) -> Any:
    expected = prop.get("type")
    if expected == "number":
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidArgumentError(
                f"Tool '{tool_name}' arg '{key}' must be a number.", field=key
            )
        # JSON numbers are doubles; huge integer literals must not reach the tools as ints.
        try:
            value = float(value)
        except OverflowError as exc:
            raise InvalidArgumentError(
                f"Tool '{tool_name}' arg '{key}' is out of range.", field=key
            ) from exc
        if not math.isfinite(value):
            raise InvalidArgumentError(
                f"Tool '{tool_name}' arg '{key}' must be a finite number.", field=key
            )
    elif expected == "string":
        if not isinstance(value, str):
            raise InvalidArgumentError(
                f"Tool '{tool_name}' arg '{key}' must be a string.", field=key
            )
        if prop.get("format") == "uri" and not _is_url(value):
            raise InvalidArgumentError(
                f"Tool '{tool_name}' arg '{key}' must be a valid URL.", field=key
            )
    elif expected == "array":
        if not isinstance(value, list):
            raise InvalidArgumentError(
                f"Tool '{tool_name}' arg '{key}' must be an array.", field=key
            )
        items = prop.get("items")
        if isinstance(items, dict):
            return [_check_value(tool_name, key, items, item) for item in value]
        return list(value)

    allowed = prop.get("enum")
    if isinstance(allowed, list) and value not in allowed:
        raise InvalidArgumentError(
            f"Tool '{tool_name}' arg '{key}' must be one of: {', '.join(map(str, allowed))}.",
            field=key,
        )
    return value


def _is_url(raw: str) -> bool:
    cleaned = raw.strip()
    if not cleaned or cleaned != raw:
        return False
    try:
        parsed = urlparse.urlparse(cleaned)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}

    def register(self, descriptor: ToolDescriptor) -> None:
        if descriptor.name in self._tools:
            raise DuplicateToolError(f"Tool '{descriptor.name}' is already registered.")
        self._tools[descriptor.name] = descriptor

    def get_descriptor(self, name: str) -> ToolDescriptor:
        try:
            return self._tools[name]
        except KeyError as exc:
            raise UnknownToolError(f"Tool '{name}' is not registered.") from exc

    async def invoke(self, name: str, args: dict[str, Any] | None) -> ToolCallResult:
        descriptor = self.get_descriptor(name)
        validated_args = descriptor.validate_args(args)
        logger.info("Calling tool %s", name)
        return await descriptor.tool.run(validated_args)

    def list_tools(self) -> list[ToolDescriptor]:
        return list(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
