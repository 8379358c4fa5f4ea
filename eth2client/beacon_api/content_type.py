"""Content-type negotiation between SSZ and JSON."""

import json
from enum import Enum

SSZ_MEDIA_TYPE = "application/octet-stream"
JSON_MEDIA_TYPE = "application/json"

# SSZ preferred, JSON accepted.
DEFAULT_ACCEPT = f"{SSZ_MEDIA_TYPE};q=1,{JSON_MEDIA_TYPE};q=0.9"


class ContentType(Enum):
    UNKNOWN = "Unknown"
    SSZ = "SSZ"
    JSON = "JSON"

    @property
    def media_type(self) -> str:
        """Media type for Accept/Content-Type headers.

        UNKNOWN maps to "unknown", which must never be sent on the wire.
        """
        return _MEDIA_TYPES.get(self, "unknown")

    @classmethod
    def from_media_type(cls, media_type: str) -> "ContentType":
        """Parse a media type, ignoring any parameters after ';'.

        Raises:
            ValueError: if the media type is empty or not SSZ/JSON
        """
        base = media_type.split(";", 1)[0].strip().lower()
        if base == SSZ_MEDIA_TYPE:
            return cls.SSZ
        if base == JSON_MEDIA_TYPE:
            return cls.JSON
        if not base:
            raise ValueError("unrecognised content type: no content type supplied")
        raise ValueError(f"unrecognised content type {media_type}")

    @classmethod
    def parse(cls, name: str) -> "ContentType":
        """Parse the enum name ("ssz", "JSON", ...), case-insensitively."""
        for member in cls:
            if member.value.lower() == name.strip().lower():
                return member
        raise ValueError(f"unrecognised content type {name}")

    def to_json(self) -> str:
        return json.dumps(self.value)

    @classmethod
    def from_json(cls, data: str) -> "ContentType":
        value = json.loads(data)
        if not isinstance(value, str):
            raise ValueError("content type must be a JSON string")
        return cls.parse(value)

    def __str__(self) -> str:
        return self.value


_MEDIA_TYPES = {
    ContentType.SSZ: SSZ_MEDIA_TYPE,
    ContentType.JSON: JSON_MEDIA_TYPE,
}


def parse_from_media_type(media_type: str) -> ContentType:
    return ContentType.from_media_type(media_type)


def accept_header(enforce_json: bool = False, ssz_supported: bool = True) -> str:
    """Accept header for a GET request."""
    if enforce_json or not ssz_supported:
        return JSON_MEDIA_TYPE
    return DEFAULT_ACCEPT


__all__ = [
    "ContentType",
    "SSZ_MEDIA_TYPE",
    "JSON_MEDIA_TYPE",
    "DEFAULT_ACCEPT",
    "parse_from_media_type",
    "accept_header",
]
