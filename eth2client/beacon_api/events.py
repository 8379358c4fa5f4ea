"""Server-sent event stream from /eth/v1/events."""

import asyncio
import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Optional

import aiohttp

from .. import metrics
from ..exceptions import InvalidOptionsError
from ..spec.json_codec import from_json
from ..spec.types import (
    Attestation,
    AttesterSlashing,
    BlobSidecar,
    Phase0Attestation,
    ProposerSlashing,
    SignedBLSToExecutionChange,
    SignedContributionAndProof,
    SignedVoluntaryExit,
    SingleAttestation,
)
from .types import (
    BlockEvent,
    ChainReorgEvent,
    Event,
    FinalizedCheckpointEvent,
    HeadEvent,
)

logger = logging.getLogger(__name__)

EventHandler = Callable[[Event], Any]


def _attestation(data: dict):
    # Electra attestations carry committee bits.
    if "committee_bits" in data:
        return from_json(Attestation, data)
    return from_json(Phase0Attestation, data)


def _raw(data: dict) -> dict:
    return data


EVENT_DECODERS: dict[str, Callable[[dict], Any]] = {
    "head": HeadEvent.from_dict,
    "block": BlockEvent.from_dict,
    "attestation": _attestation,
    "single_attestation": lambda data: from_json(SingleAttestation, data),
    "voluntary_exit": lambda data: from_json(SignedVoluntaryExit, data),
    "finalized_checkpoint": FinalizedCheckpointEvent.from_dict,
    "chain_reorg": ChainReorgEvent.from_dict,
    "contribution_and_proof": lambda data: from_json(SignedContributionAndProof, data),
    "payload_attributes": _raw,
    "proposer_slashing": lambda data: from_json(ProposerSlashing, data),
    "attester_slashing": lambda data: from_json(AttesterSlashing, data),
    "bls_to_execution_change": lambda data: from_json(SignedBLSToExecutionChange, data),
    "blob_sidecar": _raw,
}

SUPPORTED_TOPICS = frozenset(EVENT_DECODERS)


def validate_topics(topics: list[str]) -> None:
    if not topics:
        raise InvalidOptionsError("no topics supplied")
    for topic in topics:
        if topic not in SUPPORTED_TOPICS:
            raise InvalidOptionsError(f"unsupported event topic {topic}")


def decode_event(topic: str, payload: str) -> Event:
    """Decode the data of one event.

    Raises:
        ValueError: if the topic is unknown or the data does not decode
    """
    decoder = EVENT_DECODERS.get(topic)
    if decoder is None:
        raise ValueError(f"unhandled event topic {topic}")
    try:
        data = json.loads(payload)
        if not isinstance(data, dict):
            raise ValueError("event data is not an object")
        return Event(topic=topic, data=decoder(data))
    except (KeyError, TypeError) as e:
        raise ValueError(f"invalid {topic} event: {e}") from e


class EventStream:
    """Long-lived subscription that reconnects after a fixed delay.

    The handler is called in the stream's own task, one event at a time.
    Coroutine handlers are awaited before the next event is read.
    """

    def __init__(
        self,
        session_factory: Callable[[], Awaitable[aiohttp.ClientSession]],
        url: str,
        topics: list[str],
        handler: EventHandler,
        headers: Optional[dict[str, str]] = None,
        reconnect_delay: float = 1.0,
        metrics_enabled: bool = True,
    ):
        validate_topics(topics)
        self._session_factory = session_factory
        self.url = url
        self.topics = list(topics)
        self._handler = handler
        self._headers = dict(headers or {})
        self._headers["Accept"] = "text/event-stream"
        self._reconnect_delay = reconnect_delay
        self._metrics_enabled = metrics_enabled
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the stream and wait for its task to finish."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.error(f"Event stream task failed: {e}")
            self._task = None

    async def _run(self) -> None:
        while self._running:
            try:
                session = await self._session_factory()
                logger.info(f"Connecting to event stream: {self.url}")

                async with session.get(
                    self.url,
                    headers=self._headers,
                    timeout=aiohttp.ClientTimeout(total=None, sock_read=None),
                ) as response:
                    if response.status != 200:
                        logger.warning(f"Event stream connection failed: {response.status}")
                    else:
                        logger.info("Event stream connection established")
                        await self._read(response)
                        logger.warning("Event stream closed by beacon node")

            except asyncio.CancelledError:
                break
            except aiohttp.ClientError as e:
                logger.warning(f"Event stream connection error: {e}")
            except Exception as e:
                logger.warning(f"Unexpected event stream error: {e}")

            if self._running:
                await asyncio.sleep(self._reconnect_delay)

    async def _read(self, response: aiohttp.ClientResponse) -> None:
        event_type = None
        event_data: list[str] = []

        async for raw_line in response.content:
            if not self._running:
                break

            line = raw_line.decode("utf-8", errors="replace").rstrip("\r\n")

            if not line:
                if event_type and event_data:
                    await self._dispatch(event_type, "\n".join(event_data))
                event_type = None
                event_data = []
                continue

            if line.startswith(":"):
                continue
            if line.startswith("event:"):
                event_type = line[6:].strip()
            elif line.startswith("data:"):
                event_data.append(line[5:].strip())

    async def _dispatch(self, topic: str, payload: str) -> None:
        try:
            event = decode_event(topic, payload)
        except ValueError as e:
            logger.error(f"Failed to parse {topic} event: {e}")
            return

        if self._metrics_enabled:
            metrics.record_event(topic)

        try:
            result = self._handler(event)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Error processing {topic} event: {e}")


__all__ = [
    "EventStream",
    "EventHandler",
    "EVENT_DECODERS",
    "SUPPORTED_TOPICS",
    "validate_topics",
    "decode_event",
]
