"""JSON codec for socket requests with null and allowed-value checks."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable


class CodecError(ValueError):
    """Raised when a request body cannot be decoded or fails a check."""


@dataclass(frozen=True)
class Field:
    """One expected request field.

    ``empty`` allows the field to be missing or null (a string field then
    becomes ""); ``valid`` restricts the field to the listed strings.
    """

    name: str
    kind: type | None = str
    empty: bool = False
    valid: tuple[str, ...] = ()


def _lookup(obj: dict[str, Any], key: str) -> Any:
    folded = key.casefold()
    found = None
    for name, value in obj.items():
        if name.casefold() == folded:
            found = value
    return found


def _matches(value: Any, kind: type) -> bool:
    if kind is bool:
        return isinstance(value, bool)
    if kind is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if kind is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, kind)


def _decode_object(data: str | bytes) -> dict[str, Any]:
    try:
        body = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise CodecError(str(exc)) from exc
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise CodecError("request body must be a JSON object")
    return body


class JSONCodec:
    """Decodes socket request bodies and encodes error replies."""

    def read_name(self, data: str | bytes) -> str:
        """Return the request name of a body, or "" when there is none."""
        try:
            body = _decode_object(data)
        except CodecError:
            return ""
        name = _lookup(body, "Request")
        return name if isinstance(name, str) else ""

    def unmarshal(self, data: str | bytes, fields: Iterable[Field]) -> dict[str, Any]:
        """Decode a body into a dict holding one value for each field."""
        body = _decode_object(data)
        specs = list(fields)

        values = {}
        for spec in specs:
            value = _lookup(body, spec.name)
            if value is not None and spec.kind is not None and not _matches(value, spec.kind):
                raise CodecError(f"field {spec.name} must be of type {spec.kind.__name__}")
            values[spec.name] = value

        for spec in specs:
            value = values[spec.name]
            if value is None:
                if not spec.empty:
                    raise CodecError(f'Field "{spec.name.lower()}" cannot be null')
                if spec.kind is str:
                    value = values[spec.name] = ""
            if spec.valid and not (isinstance(value, str) and value in spec.valid):
                raise CodecError(f"Field {spec.name} isn't valid.")

        return values

    def error(self, err: BaseException) -> dict[str, Any]:
        """Return the reply sent for a failed request."""
        return {"message": str(err), "success": False}