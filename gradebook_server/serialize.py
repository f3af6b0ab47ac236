"""Wire serialization for engine outputs (camelCase keys, absent optionals omitted)."""
from __future__ import annotations

import typing as t
from dataclasses import fields, is_dataclass
from enum import Enum

from pydantic.alias_generators import to_camel


def to_json_dict(value: t.Any) -> t.Any:
    """Convert engine dataclasses into JSON-ready structures.

    Dataclass field names become camelCase keys using the same alias generator as
    the REST models (a field can override its key with
    ``metadata={"json": "..."}``) and dataclass fields holding None are left out,
    so optional values such as ``dueAt`` or ``gradePct`` only appear when present.
    Plain dict values, including raw Canvas payloads, are kept as they are.
    """
    if is_dataclass(value) and not isinstance(value, type):
        result: dict[str, t.Any] = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            result[f.metadata.get("json", to_camel(f.name))] = to_json_dict(item)
        return result
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {
            (key.value if isinstance(key, Enum) else key): to_json_dict(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [to_json_dict(item) for item in value]
    return value
