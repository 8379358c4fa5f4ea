"""Decoding of the standard Beacon API JSON envelope.

Almost every JSON endpoint answers with

    {"data": <payload>, "execution_optimistic": false, "finalized": true, ...}

decode_json_response() splits that into the typed payload and a metadata
dict holding every other top-level field.
"""

import json
import typing
from typing import Any

from remerkleable.core import View

from ..exceptions import MalformedResponseError
from ..spec.json_codec import from_json
from ..spec.types import Root


def decode_json_response(body: bytes, witness: Any) -> tuple[Any, dict[str, Any]]:
    """Decode a JSON envelope into (data, metadata).

    `witness` names the payload type. It can be an SSZ view type, a class
    with a `from_dict` classmethod, `list[X]` of either, or a plain builtin
    such as `dict` or `str`. A fresh value is built on every call.

    "dependent_root" is decoded to a Root. Every other non-"data" field is
    copied into metadata as parsed. When the body has no "data" field the
    zero value of the witness is returned with the metadata.

    Raises:
        MalformedResponseError: if the body is not a JSON object, or the data
            or a metadata field cannot be decoded
    """
    try:
        document = json.loads(body)
    except ValueError as e:
        raise MalformedResponseError(f"failed to parse JSON: {e}") from e
    if not isinstance(document, dict):
        raise MalformedResponseError("failed to parse JSON: response is not an object")

    data = None
    has_data = False
    metadata: dict[str, Any] = {}
    for key, value in document.items():
        if key == "data":
            has_data = True
            try:
                data = decode_value(witness, value)
            except (ValueError, TypeError, KeyError) as e:
                raise MalformedResponseError(f"failed to unmarshal data: {e}") from e
        elif key == "dependent_root":
            try:
                metadata[key] = from_json(Root, value)
            except ValueError as e:
                raise MalformedResponseError(f"failed to unmarshal {key}: {e}") from e
        else:
            metadata[key] = value

    if not has_data:
        data = zero_value(witness)
    return data, metadata


def decode_value(witness: Any, value: Any) -> Any:
    """Decode one JSON value according to the witness type."""
    origin = typing.get_origin(witness)
    if origin is list:
        (item_type,) = typing.get_args(witness)
        if not isinstance(value, list):
            raise ValueError("expected array")
        return [decode_value(item_type, item) for item in value]

    if isinstance(witness, type) and issubclass(witness, View):
        return from_json(witness, value)
    if hasattr(witness, "from_dict"):
        if not isinstance(value, dict):
            raise ValueError(f"expected object for {witness.__name__}")
        return witness.from_dict(value)
    if witness is int:
        if isinstance(value, bool):
            raise ValueError("expected integer")
        return int(value)
    if witness in (str, bool, dict, list):
        if not isinstance(value, witness):
            raise ValueError(f"expected {witness.__name__}")
        return value
    if witness is Any or witness is None:
        return value
    raise TypeError(f"unsupported witness type {witness!r}")


def zero_value(witness: Any) -> Any:
    if typing.get_origin(witness) is list:
        return []
    if isinstance(witness, type) and issubclass(witness, View):
        return witness()
    if witness in (int, str, bool, dict, list):
        return witness()
    return None


__all__ = ["decode_json_response", "decode_value", "zero_value"]
