"""Selection of the concrete decoder for a response.

Decoding happens in two steps. The payload type comes from the consensus
version (and the blinded flag, where an endpoint serves both block
variants). The content type then decides between the SSZ decoder and the
JSON envelope decoder. Both steps fail loudly: an unhandled version or a
decode error raises, naming the fork and whether the block was blinded.
"""

import json
import logging
from typing import Any, Optional

from remerkleable.complex import Container, List
from remerkleable.core import View

from ..exceptions import MalformedResponseError, UnsupportedVersionError
from ..spec import constants
from ..spec.dynamic import DynamicSSZ
from ..spec.forks import ConsensusVersion
from ..spec.types import BlobSidecar
from .content_type import ContentType
from .envelope import decode_json_response
from .response import (
    EXECUTION_PAYLOAD_BLINDED_HEADER,
    EXECUTION_PAYLOAD_VALUE_HEADER,
    HTTPResponse,
    parse_bool_header,
    parse_wei_header,
)
from .versioned import (
    Response,
    VersionedResult,
    VersionedSignedExecutionPayloadEnvelope,
    VersionedV3Proposal,
)

logger = logging.getLogger(__name__)


def sized_type(typ: Any, dynamic: Optional[DynamicSSZ]) -> Any:
    """`typ`, rebuilt against the chain spec when dynamic SSZ is in use."""
    if dynamic is not None and isinstance(typ, type) and issubclass(typ, Container):
        return dynamic.container_type(typ)
    return typ


def decode_payload(
    response: HTTPResponse,
    typ: Any,
    *,
    endpoint: str,
    description: str,
    dynamic: Optional[DynamicSSZ] = None,
) -> tuple[Any, dict[str, Any]]:
    """Decode the body of `response` as `typ`, returning (data, metadata).

    SSZ responses carry their metadata in headers, JSON responses in the
    envelope.
    """
    if response.content_type == ContentType.SSZ:
        if not (isinstance(typ, type) and issubclass(typ, View)):
            raise MalformedResponseError(f"SSZ not supported for {description}", endpoint)
        try:
            if dynamic is not None:
                data = dynamic.decode(typ, response.body)
            else:
                data = typ.decode_bytes(response.body)
        except Exception as e:
            raise MalformedResponseError(f"failed to decode {description}: {e}", endpoint) from e
        return data, response.metadata_from_headers()

    if response.content_type == ContentType.JSON:
        try:
            return decode_json_response(response.body, sized_type(typ, dynamic))
        except MalformedResponseError as e:
            raise MalformedResponseError(f"failed to decode {description}: {e}", endpoint) from e

    raise MalformedResponseError(f"unhandled content type {response.content_type}", endpoint)


def resolve_version(
    response: HTTPResponse,
    fallback: Optional[ConsensusVersion] = None,
) -> ConsensusVersion:
    """Response version, or `fallback` when the response did not carry one."""
    version = response.consensus_version
    if version == ConsensusVersion.UNKNOWN and fallback is not None:
        logger.debug(f"No consensus version in response; using {fallback}")
        return fallback
    return version


def decode_versioned(
    response: HTTPResponse,
    result_cls: type[VersionedResult],
    *,
    endpoint: str,
    dynamic: Optional[DynamicSSZ] = None,
    fallback_version: Optional[ConsensusVersion] = None,
) -> Response:
    """Decode a multi-fork response into a `result_cls` tagged by version.

    Raises:
        UnsupportedVersionError: if `result_cls` has no type for the version
        MalformedResponseError: if the body does not decode as that type
    """
    version = resolve_version(response, fallback_version)
    try:
        typ = result_cls.type_for(version)
    except UnsupportedVersionError as e:
        raise UnsupportedVersionError(str(e), endpoint) from e

    data, metadata = decode_payload(
        response,
        typ,
        endpoint=endpoint,
        description=f"{version} {result_cls.KIND}",
        dynamic=dynamic,
    )
    return Response(data=result_cls(version=version, data=data), metadata=metadata)


def decode_v3_proposal(
    response: HTTPResponse,
    *,
    endpoint: str,
    dynamic: Optional[DynamicSSZ] = None,
    fallback_version: Optional[ConsensusVersion] = None,
) -> Response:
    """Decode a v3 proposal, choosing the full or blinded block type first.

    The blinded flag and execution value come from the response headers, or
    from the JSON envelope when a node only sets them there.
    """
    version = resolve_version(response, fallback_version)

    blinded = response.execution_payload_blinded
    execution_value = response.execution_payload_value
    consensus_value = response.consensus_block_value
    if response.content_type == ContentType.JSON and (blinded is None or execution_value is None):
        envelope = _envelope_fields(response.body)
        try:
            if blinded is None and "execution_payload_blinded" in envelope:
                blinded = parse_bool_header(envelope["execution_payload_blinded"])
            if execution_value is None and "execution_payload_value" in envelope:
                execution_value = parse_wei_header(str(envelope["execution_payload_value"]))
            if consensus_value is None and "consensus_block_value" in envelope:
                consensus_value = parse_wei_header(str(envelope["consensus_block_value"]))
        except ValueError as e:
            raise MalformedResponseError(str(e), endpoint) from e

    if blinded is None:
        raise MalformedResponseError(f"missing {EXECUTION_PAYLOAD_BLINDED_HEADER} header", endpoint)
    if execution_value is None:
        raise MalformedResponseError(f"missing {EXECUTION_PAYLOAD_VALUE_HEADER} header", endpoint)

    try:
        typ = VersionedV3Proposal.type_for(version, blinded)
    except UnsupportedVersionError as e:
        raise UnsupportedVersionError(str(e), endpoint) from e

    description = f"{version} {'blinded ' if blinded else ''}block proposal"
    data, metadata = decode_payload(
        response, typ, endpoint=endpoint, description=description, dynamic=dynamic
    )
    proposal = VersionedV3Proposal(
        version=version,
        data=data,
        blinded=blinded,
        execution_value=execution_value,
        consensus_value=consensus_value,
    )
    return Response(data=proposal, metadata=metadata)


def decode_signed_execution_payload_envelope(
    response: HTTPResponse,
    *,
    endpoint: str,
    dynamic: Optional[DynamicSSZ] = None,
) -> Response:
    version = response.consensus_version
    if version not in VersionedSignedExecutionPayloadEnvelope.TYPES:
        raise UnsupportedVersionError(
            f"execution payload envelope not available for block version {version}", endpoint
        )
    return decode_versioned(
        response,
        VersionedSignedExecutionPayloadEnvelope,
        endpoint=endpoint,
        dynamic=dynamic,
    )


def decode_blob_sidecars(
    response: HTTPResponse,
    *,
    endpoint: str,
    dynamic: Optional[DynamicSSZ] = None,
) -> Response:
    """Decode a list of blob sidecars (SSZ list or JSON array)."""
    sidecar_type = sized_type(BlobSidecar, dynamic)
    if response.content_type == ContentType.SSZ:
        limit = (
            dynamic.value("MAX_BLOB_COMMITMENTS_PER_BLOCK")
            if dynamic is not None
            else constants.MAX_BLOB_COMMITMENTS_PER_BLOCK()
        )
        try:
            sidecars = List[sidecar_type, limit].decode_bytes(response.body)
        except Exception as e:
            raise MalformedResponseError(f"failed to decode blob sidecars: {e}", endpoint) from e
        return Response(data=list(sidecars), metadata=response.metadata_from_headers())

    data, metadata = decode_payload(
        response, list[sidecar_type], endpoint=endpoint, description="blob sidecars"
    )
    return Response(data=data, metadata=metadata)


def decode_data(
    response: HTTPResponse,
    witness: Any,
    *,
    endpoint: str,
    description: str,
    dynamic: Optional[DynamicSSZ] = None,
) -> Response:
    """Decode a single-schema response into a Response."""
    data, metadata = decode_payload(
        response, witness, endpoint=endpoint, description=description, dynamic=dynamic
    )
    return Response(data=data, metadata=metadata)


def _envelope_fields(body: bytes) -> dict[str, Any]:
    try:
        document = json.loads(body)
    except ValueError:
        return {}
    if not isinstance(document, dict):
        return {}
    return {key: value for key, value in document.items() if key != "data"}


__all__ = [
    "sized_type",
    "decode_payload",
    "resolve_version",
    "decode_versioned",
    "decode_v3_proposal",
    "decode_signed_execution_payload_envelope",
    "decode_blob_sidecars",
    "decode_data",
]
