"""Transport results and the header-derived metadata used for dispatch."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from ..exceptions import MalformedResponseError
from ..spec.forks import ConsensusVersion
from .content_type import ContentType

logger = logging.getLogger(__name__)

CONTENT_TYPE_HEADER = "Content-Type"
CONSENSUS_VERSION_HEADER = "Eth-Consensus-Version"
EXECUTION_PAYLOAD_BLINDED_HEADER = "Eth-Execution-Payload-Blinded"
EXECUTION_PAYLOAD_VALUE_HEADER = "Eth-Execution-Payload-Value"
CONSENSUS_BLOCK_VALUE_HEADER = "Eth-Consensus-Block-Value"


def canonical_header(name: str) -> str:
    """Canonicalise a header name: "eth-consensus-version" -> "Eth-Consensus-Version"."""
    return "-".join(part.capitalize() for part in name.strip().split("-"))


def group_headers(raw_headers: Iterable[tuple[str, str]]) -> dict[str, list[str]]:
    """Group (name, value) pairs by canonical header name, keeping every value."""
    grouped: dict[str, list[str]] = {}
    for name, value in raw_headers:
        grouped.setdefault(canonical_header(name), []).append(value)
    return grouped


def resolve_content_type(header_values: dict[str, list[str]], body: bytes) -> ContentType:
    """Content type declared by the server.

    Raises:
        ValueError: if the header is missing, repeated or unrecognised
    """
    if not body:
        # Nothing to decode; servers often omit the header here.
        return ContentType.JSON
    values = header_values.get(CONTENT_TYPE_HEADER)
    if values is None:
        raise ValueError("no content type supplied in response")
    if len(values) != 1:
        raise ValueError(f"malformed content type ({len(values)} entries)")
    return ContentType.from_media_type(values[0])


def resolve_consensus_version(
    header_values: dict[str, list[str]],
    body: bytes,
    content_type: ContentType,
) -> ConsensusVersion:
    """Consensus version of a response.

    The Eth-Consensus-Version header is authoritative. Only when it is absent
    is a JSON body inspected for a top-level "version" field. An SSZ body with
    no header resolves to UNKNOWN.

    Raises:
        MalformedResponseError: if the header is repeated or unparseable, or
            the JSON body cannot be read for its version
    """
    values = header_values.get(CONSENSUS_VERSION_HEADER)
    if values is None:
        if content_type != ContentType.JSON or not body:
            return ConsensusVersion.UNKNOWN
        try:
            document = json.loads(body)
            if not isinstance(document, dict):
                raise ValueError("response is not a JSON object")
            version = document.get("version")
            if version is None:
                return ConsensusVersion.UNKNOWN
            if not isinstance(version, str):
                raise ValueError("version is not a string")
            return ConsensusVersion.parse(version)
        except ValueError as e:
            raise MalformedResponseError(
                f"no consensus version header and failed to parse response: {e}"
            ) from e

    if len(values) != 1:
        raise MalformedResponseError(f"malformed consensus version ({len(values)} entries)")
    try:
        return ConsensusVersion.parse(values[0])
    except ValueError as e:
        raise MalformedResponseError(f"failed to parse consensus version: {e}") from e


def parse_bool_header(value: Any) -> bool:
    """Normalise a header flag that may arrive as a bool or a string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in ("true", "1"):
            return True
        if text in ("false", "0", ""):
            return False
    raise ValueError(f"invalid boolean header value {value!r}")


def parse_wei_header(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == "":
        return None
    try:
        number = int(value.strip())
    except ValueError:
        raise ValueError(f"invalid wei value {value!r}") from None
    if number < 0:
        raise ValueError(f"negative wei value {value!r}")
    return number


@dataclass
class HTTPResponse:
    """Raw result of a single beacon node call.

    Header-derived flags are parsed once when the response is built and are
    not re-derived by decoders.
    """

    status_code: int
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)
    content_type: ContentType = ContentType.JSON
    consensus_version: ConsensusVersion = ConsensusVersion.UNKNOWN
    execution_payload_blinded: Optional[bool] = None
    execution_payload_value: Optional[int] = None
    consensus_block_value: Optional[int] = None

    @classmethod
    def from_raw(
        cls,
        status_code: int,
        raw_headers: Iterable[tuple[str, str]],
        body: bytes,
    ) -> "HTTPResponse":
        """Build a response from the wire, resolving content type and version.

        A missing or unusable Content-Type header is treated as JSON. A bad
        Eth-Consensus-Version header or blinded flag raises
        MalformedResponseError.
        """
        header_values = group_headers(raw_headers)
        response = cls(
            status_code=status_code,
            body=body,
            headers={name: ";".join(values) for name, values in header_values.items()},
        )

        try:
            response.content_type = resolve_content_type(header_values, body)
        except ValueError as e:
            logger.debug(f"Failed to obtain content type ({e}); assuming JSON")
            response.content_type = ContentType.JSON

        response.consensus_version = resolve_consensus_version(
            header_values, body, response.content_type
        )

        try:
            blinded = response.headers.get(EXECUTION_PAYLOAD_BLINDED_HEADER)
            if blinded is not None:
                response.execution_payload_blinded = parse_bool_header(blinded)
            response.execution_payload_value = parse_wei_header(
                response.headers.get(EXECUTION_PAYLOAD_VALUE_HEADER)
            )
            response.consensus_block_value = parse_wei_header(
                response.headers.get(CONSENSUS_BLOCK_VALUE_HEADER)
            )
        except ValueError as e:
            raise MalformedResponseError(str(e)) from e

        return response

    def metadata_from_headers(self) -> dict[str, Any]:
        """Response headers as metadata, used where there is no JSON envelope."""
        return dict(self.headers)


__all__ = [
    "HTTPResponse",
    "CONTENT_TYPE_HEADER",
    "CONSENSUS_VERSION_HEADER",
    "EXECUTION_PAYLOAD_BLINDED_HEADER",
    "EXECUTION_PAYLOAD_VALUE_HEADER",
    "CONSENSUS_BLOCK_VALUE_HEADER",
    "canonical_header",
    "group_headers",
    "resolve_content_type",
    "resolve_consensus_version",
    "parse_bool_header",
    "parse_wei_header",
]
