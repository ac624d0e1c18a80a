"""Declarative input descriptors for the Bitbucket tools.

Each tool declares its inputs as a table of `FieldSpec`s. The same table
produces the JSON schema advertised to MCP clients and validates the
argument bag of every call, applying defaults.
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from ..exceptions import ToolArgumentError

FieldKind = Literal["string", "integer", "object"]

_MISSING = object()


@dataclass(frozen=True)
class FieldSpec:
    """One tool input: its kind, whether it is required, default and allowed values."""

    kind: FieldKind
    description: str = ""
    required: bool = True
    default: Any = _MISSING
    enum_values: tuple[str, ...] | None = None
    minimum: int | None = None
    fields: Mapping[str, "FieldSpec"] | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING

    def to_json_schema(self) -> dict[str, Any]:
        if self.kind == "object":
            schema = object_schema(self.fields or {})
        else:
            schema = {"type": self.kind}
        if self.description:
            schema["description"] = self.description
        if self.enum_values:
            schema["enum"] = list(self.enum_values)
        if self.has_default:
            schema["default"] = self.default
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        return schema

    def validate(self, name: str, value: Any) -> Any:
        if self.kind == "string":
            if not isinstance(value, str):
                raise ToolArgumentError(f"'{name}' must be a string")
            if self.enum_values and value not in self.enum_values:
                allowed = ", ".join(self.enum_values)
                raise ToolArgumentError(f"'{name}' must be one of: {allowed}")
            return value

        if self.kind == "integer":
            # JSON clients may send 42.0 for 42; booleans are not numbers here.
            if isinstance(value, bool) or not isinstance(value, int | float):
                raise ToolArgumentError(f"'{name}' must be an integer")
            if isinstance(value, float):
                if not value.is_integer():
                    raise ToolArgumentError(f"'{name}' must be an integer")
                value = int(value)
            if self.minimum is not None and value < self.minimum:
                raise ToolArgumentError(f"'{name}' must be at least {self.minimum}")
            return value

        if not isinstance(value, Mapping):
            raise ToolArgumentError(f"'{name}' must be an object")
        return validate_fields(self.fields or {}, value, prefix=f"{name}.")


def object_schema(fields: Mapping[str, FieldSpec]) -> dict[str, Any]:
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {name: spec.to_json_schema() for name, spec in fields.items()},
    }
    required = [
        name for name, spec in fields.items() if spec.required and not spec.has_default
    ]
    if required:
        schema["required"] = required
    return schema


def validate_fields(
    fields: Mapping[str, FieldSpec],
    arguments: Mapping[str, Any] | None,
    prefix: str = "",
) -> dict[str, Any]:
    """Check an argument bag against a descriptor table.

    Unknown keys are dropped, defaults are applied and optional fields that
    are absent (or null) are left out.

    Raises:
        ToolArgumentError: On a missing required field or a value of the wrong kind
    """
    arguments = arguments or {}
    validated: dict[str, Any] = {}
    for name, spec in fields.items():
        value = arguments.get(name)
        if value is None:
            if spec.has_default:
                validated[name] = spec.default
            elif spec.required:
                raise ToolArgumentError(f"Missing required argument '{prefix}{name}'")
            continue
        validated[name] = spec.validate(f"{prefix}{name}", value)
    return validated


ToolHandler = Callable[..., Awaitable[str]]


@dataclass(frozen=True)
class ToolSpec:
    """A tool exposed to agent runtimes: name, description, inputs and handler.

    Tools tagged "write" change data in Bitbucket and are unavailable in
    read-only mode.
    """

    name: str
    description: str
    fields: Mapping[str, FieldSpec]
    handler: ToolHandler
    tags: frozenset[str] = field(default_factory=lambda: frozenset({"read"}))

    @property
    def is_write(self) -> bool:
        return "write" in self.tags

    def input_schema(self) -> dict[str, Any]:
        return object_schema(self.fields)

    def validate(self, arguments: Mapping[str, Any] | None) -> dict[str, Any]:
        return validate_fields(self.fields, arguments)
