"""Beacon node REST API client."""

import asyncio
import inspect
import json
import logging
import time
from typing import Any, Callable, Optional

import aiohttp

from .. import metrics
from ..config import ClientConfig
from ..exceptions import (
    BeaconAPIError,
    BlockNotFoundError,
    Eth2ClientError,
    InvalidOptionsError,
    MalformedResponseError,
    NotActiveError,
    NotSyncedError,
)
from ..spec.dynamic import DynamicSSZ
from ..spec.forks import ConsensusVersion
from ..spec.json_codec import to_json
from ..spec.types import AttestationData, Fork
from ..ssz import compute_domain
from ..version import identify_client, is_dvt_middleware
from .cache import StaticValueCache
from .content_type import JSON_MEDIA_TYPE, ContentType, accept_header
from .dispatch import (
    decode_blob_sidecars,
    decode_data,
    decode_signed_execution_payload_envelope,
    decode_v3_proposal,
    decode_versioned,
)
from .events import EventHandler, EventStream
from .opts import (
    AggregateAttestationOpts,
    AttestationDataOpts,
    BlobSidecarsOpts,
    BlockOpts,
    ProposalOpts,
    SignedBeaconBlockOpts,
    SubmitAttestationsOpts,
    SubmitProposalOpts,
)
from .response import CONSENSUS_VERSION_HEADER, HTTPResponse
from .spec import consensus_version_at_epoch, parse_spec, slots_per_epoch
from .types import (
    BeaconBlockHeader,
    BlockRoot,
    DepositContract,
    Genesis,
    NodeVersion,
    SyncState,
)
from .utils import to_hex, url_for_call
from .validation import (
    check_aggregate_attestation,
    check_attestation_data,
    check_block_root,
    check_proposal,
)
from .versioned import (
    Response,
    VersionedAttestation,
    VersionedBlindedProposal,
    VersionedProposal,
    VersionedSignedBeaconBlock,
    VersionedSignedProposal,
    VersionedSingleAttestation,
)

logger = logging.getLogger(__name__)

HOOKS = ("on_active", "on_inactive", "on_synced", "on_desynced")


class BeaconClient:
    """Client for a beacon node's REST API.

    Use as an async context manager, or call start() and close() directly:

        async with BeaconClient(ClientConfig(address="localhost:5052")) as client:
            genesis = await client.genesis()
    """

    def __init__(
        self,
        config: ClientConfig,
        clock: Callable[[], float] = time.monotonic,
    ):
        config.validate()
        logging.getLogger("eth2client").setLevel(config.log_level.upper())
        self.config = config
        self.base_url = config.address
        self._session: Optional[aiohttp.ClientSession] = None
        self._cache = StaticValueCache(ttl=config.static_value_ttl, clock=clock)
        self._dynamic: Optional[DynamicSSZ] = None
        self._active = False
        self._synced = False
        self.connected_to_dvt_middleware = False
        self.node_client: Optional[str] = None
        self._monitor_task: Optional[asyncio.Task] = None
        self._event_streams: list[EventStream] = []
        self._hooks: dict[str, list[Callable]] = {name: [] for name in HOOKS}

    async def __aenter__(self) -> "BeaconClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def address(self) -> str:
        return self.base_url

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_synced(self) -> bool:
        return self._synced

    @property
    def cache(self) -> StaticValueCache:
        return self._cache

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers=self.config.headers,
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            )
        return self._session

    async def start(self) -> None:
        """Check the node and begin monitoring its connection state.

        Raises:
            NotActiveError: if the node cannot be reached and delayed start
                is not allowed
        """
        await self.check_connection_state()
        if not self._active and not self.config.allow_delayed_start:
            await self.close()
            raise NotActiveError(f"beacon node at {self.base_url} is not reachable")
        if self._monitor_task is None:
            self._monitor_task = asyncio.create_task(self._monitor_loop())

    async def close(self) -> None:
        """Stop background tasks and close the HTTP session."""
        for stream in self._event_streams:
            await stream.stop()
        self._event_streams.clear()

        if self._monitor_task:
            self._monitor_task.cancel()
            try:
                await self._monitor_task
            except asyncio.CancelledError:
                pass
            self._monitor_task = None

        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    # Transport

    async def _request(
        self,
        method: str,
        template: str,
        path: str,
        query: str = "",
        body: Optional[bytes] = None,
        headers: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
        not_found: Optional[type] = None,
    ) -> HTTPResponse:
        """Perform one call and build the HTTPResponse.

        `template` is the endpoint path with placeholders, used as a metrics
        label.

        Raises:
            BeaconAPIError: on a non-2xx status (`not_found` on 404 if given)
            MalformedResponseError: if the response headers are unusable
        """
        session = await self._ensure_session()
        url = url_for_call(self.base_url, path, query)
        request_headers = dict(headers or {})
        kwargs = {}
        if timeout:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)

        logger.debug(f"{method} {url}")
        started = time.monotonic()
        result = "failed"
        try:
            async with session.request(
                method,
                url,
                data=body,
                headers=request_headers,
                **kwargs,
            ) as response:
                data = await response.read()
                raw_headers = list(response.headers.items())
                status = response.status

            if status == 404 and not_found is not None:
                raise not_found(method, path, data)
            if status < 200 or status >= 300:
                raise BeaconAPIError(method, path, status, data)

            try:
                http_response = HTTPResponse.from_raw(status, raw_headers, data)
            except MalformedResponseError as e:
                raise MalformedResponseError(str(e), path) from e
            result = "succeeded"
            return http_response
        except asyncio.CancelledError:
            result = "cancelled"
            raise
        finally:
            if self.config.metrics_enabled:
                metrics.record_request(method, template, result, time.monotonic() - started)

    async def _get(
        self,
        template: str,
        path: str,
        query: str = "",
        timeout: Optional[float] = None,
        enforce_json: bool = False,
        not_found: Optional[type] = None,
    ) -> HTTPResponse:
        accept = accept_header(enforce_json=enforce_json or self.config.enforce_json)
        return await self._request(
            "GET",
            template,
            path,
            query,
            headers={"Accept": accept},
            timeout=timeout,
            not_found=not_found,
        )

    async def _post_json(
        self,
        template: str,
        path: str,
        payload: Any,
        query: str = "",
        headers: Optional[dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> HTTPResponse:
        request_headers = {"Content-Type": JSON_MEDIA_TYPE, "Accept": JSON_MEDIA_TYPE}
        request_headers.update(headers or {})
        return await self._request(
            "POST",
            template,
            path,
            query,
            body=json.dumps(payload).encode(),
            headers=request_headers,
            timeout=timeout,
        )

    # Connection state

    def add_hook(self, name: str, callback: Callable) -> None:
        """Register a callback for on_active, on_inactive, on_synced or on_desynced."""
        if name not in self._hooks:
            raise InvalidOptionsError(f"unknown hook {name}")
        self._hooks[name].append(callback)

    async def _run_hooks(self, name: str) -> None:
        for callback in self._hooks[name]:
            try:
                result = callback(self)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Error in {name} hook: {e}")

    async def check_connection_state(self) -> None:
        """Refresh the active/synced flags from /eth/v1/node/syncing."""
        was_active, was_synced = self._active, self._synced
        active = False
        synced = False
        try:
            state = (await self._fetch_node_syncing()).data
            active = True
            synced = not state.is_syncing or (state.head_slot == 0 and state.sync_distance <= 1)
        except (Eth2ClientError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f"Failed to obtain sync state from node: {e}")

        self._active = active
        self._synced = synced
        if self.config.metrics_enabled:
            metrics.update_connection_state(active, synced)

        if active and not was_active:
            logger.info(f"Connection to {self.base_url} active")
            await self._on_activation()
            await self._run_hooks("on_active")
        if was_active and not active:
            logger.info(f"Connection to {self.base_url} inactive")
            self._cache.clear()
            self._dynamic = None
            await self._run_hooks("on_inactive")
        if synced and not was_synced:
            logger.info(f"Beacon node at {self.base_url} synced")
            await self._run_hooks("on_synced")
        if was_synced and not synced:
            logger.info(f"Beacon node at {self.base_url} not synced")
            await self._run_hooks("on_desynced")

    async def _on_activation(self) -> None:
        try:
            version = (await self.node_version()).data
        except (Eth2ClientError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Failed to obtain node version: {e}")
            return
        self.node_client = identify_client(version)
        self.connected_to_dvt_middleware = is_dvt_middleware(version)
        if self.connected_to_dvt_middleware:
            logger.info(f"Connected to DVT middleware ({version})")
        else:
            logger.info(f"Connected to {self.node_client or 'unknown'} beacon node ({version})")

    async def _monitor_loop(self) -> None:
        while True:
            try:
                await asyncio.sleep(self.config.connection_check_interval)
                await self.check_connection_state()
            except asyncio.CancelledError:
                break

    def _assert_active(self) -> None:
        if not self._active:
            raise NotActiveError(f"beacon node at {self.base_url} is not active")

    def _assert_synced(self) -> None:
        self._assert_active()
        if not self._synced:
            raise NotSyncedError(f"beacon node at {self.base_url} is not synced")

    # Static values

    async def genesis(self) -> Response:
        """Genesis time, validators root and fork version (cached)."""
        return await self._cache.get("genesis", self._fetch_genesis)

    async def _fetch_genesis(self) -> Response:
        path = "/eth/v1/beacon/genesis"
        response = await self._get(path, path, enforce_json=True)
        return decode_data(response, Genesis, endpoint=path, description="genesis")

    async def spec(self) -> Response:
        """Parsed chain spec of the node (cached)."""
        return await self._cache.get("spec", self._fetch_spec)

    async def _fetch_spec(self) -> Response:
        path = "/eth/v1/config/spec"
        response = await self._get(path, path, enforce_json=True)
        result = decode_data(response, dict, endpoint=path, description="spec")
        return Response(data=parse_spec(result.data), metadata=result.metadata)

    async def fork_schedule(self) -> Response:
        """Scheduled forks in activation order (cached)."""
        return await self._cache.get("fork_schedule", self._fetch_fork_schedule)

    async def _fetch_fork_schedule(self) -> Response:
        path = "/eth/v1/config/fork_schedule"
        response = await self._get(path, path, enforce_json=True)
        result = decode_data(response, list[Fork], endpoint=path, description="fork schedule")
        return Response(
            data=sorted(result.data, key=lambda fork: int(fork.epoch)),
            metadata=result.metadata,
        )

    async def node_version(self) -> Response:
        """Software version string of the node (cached)."""
        return await self._cache.get("node_version", self._fetch_node_version)

    async def _fetch_node_version(self) -> Response:
        path = "/eth/v1/node/version"
        response = await self._get(path, path, enforce_json=True)
        result = decode_data(response, NodeVersion, endpoint=path, description="node version")
        return Response(data=result.data.version, metadata=result.metadata)

    async def deposit_contract(self) -> Response:
        """Deposit contract chain ID and address (cached)."""
        return await self._cache.get("deposit_contract", self._fetch_deposit_contract)

    async def _fetch_deposit_contract(self) -> Response:
        path = "/eth/v1/config/deposit_contract"
        response = await self._get(path, path, enforce_json=True)
        return decode_data(response, DepositContract, endpoint=path, description="deposit contract")

    async def refresh_static_values(self) -> None:
        """Drop all cached static values; the next access fetches again."""
        self._cache.clear()
        self._dynamic = None

    async def node_syncing(self) -> Response:
        self._assert_active()
        return await self._fetch_node_syncing()

    async def _fetch_node_syncing(self) -> Response:
        path = "/eth/v1/node/syncing"
        response = await self._get(path, path, enforce_json=True)
        return decode_data(response, SyncState, endpoint=path, description="sync state")

    # Fork versions and domains

    async def consensus_version_at_epoch(self, epoch: int) -> ConsensusVersion:
        return consensus_version_at_epoch((await self.spec()).data, epoch)

    async def consensus_version_at_slot(self, slot: int) -> ConsensusVersion:
        spec = (await self.spec()).data
        return consensus_version_at_epoch(spec, slot // slots_per_epoch(spec))

    async def fork_at_epoch(self, epoch: int) -> Fork:
        schedule = (await self.fork_schedule()).data
        if not schedule:
            raise MalformedResponseError("no fork schedule returned")
        current = schedule[0]
        for fork in schedule:
            if int(fork.epoch) > epoch:
                break
            current = fork
        return current

    async def domain(self, domain_type: bytes, epoch: int) -> bytes:
        """Signing domain for `domain_type` at `epoch`."""
        fork = await self.fork_at_epoch(epoch)
        genesis = (await self.genesis()).data
        if epoch < int(fork.epoch):
            fork_version = bytes(fork.previous_version)
        else:
            fork_version = bytes(fork.current_version)
        return compute_domain(domain_type, fork_version, genesis.genesis_validators_root)

    async def genesis_domain(self, domain_type: bytes) -> bytes:
        """Signing domain for `domain_type` with the genesis fork version."""
        genesis = (await self.genesis()).data
        return compute_domain(
            domain_type, genesis.genesis_fork_version, genesis.genesis_validators_root
        )

    async def _dynamic_ssz(self) -> Optional[DynamicSSZ]:
        """Chain-spec sized SSZ decoder, when custom spec support is enabled."""
        if not self.config.custom_spec_support:
            return None
        spec = (await self.spec()).data
        if self._dynamic is None or self._dynamic.spec is not spec:
            self._dynamic = DynamicSSZ(spec)
        return self._dynamic

    async def _fallback_version(
        self, response: HTTPResponse, slot: int
    ) -> Optional[ConsensusVersion]:
        """Version for an SSZ response that came without a version header."""
        if response.consensus_version != ConsensusVersion.UNKNOWN:
            return None
        if response.content_type != ContentType.SSZ:
            return None
        return await self.consensus_version_at_slot(slot)

    # Proposals

    @staticmethod
    def _proposal_query(opts: ProposalOpts, v3: bool = False) -> str:
        query = f"randao_reveal={to_hex(bytes(opts.randao_reveal))}&graffiti={to_hex(bytes(opts.graffiti))}"
        if opts.skip_randao_verification:
            query += "&skip_randao_verification"
        if v3 and opts.builder_boost_factor is not None:
            query += f"&builder_boost_factor={opts.builder_boost_factor}"
        return query

    async def proposal(self, opts: ProposalOpts) -> Response:
        """Unsigned block proposal for a slot."""
        self._assert_synced()
        opts.validate()

        path = f"/eth/v2/validator/blocks/{opts.slot}"
        response = await self._get(
            "/eth/v2/validator/blocks/{slot}", path, self._proposal_query(opts), timeout=opts.timeout
        )
        result = decode_versioned(
            response,
            VersionedProposal,
            endpoint=path,
            dynamic=await self._dynamic_ssz(),
            fallback_version=await self._fallback_version(response, opts.slot),
        )
        check_proposal(
            result.data,
            opts.slot,
            opts.randao_reveal,
            opts.graffiti,
            dvt_middleware=self.connected_to_dvt_middleware,
        )
        return result

    async def blinded_proposal(self, opts: ProposalOpts) -> Response:
        """Unsigned blinded block proposal for a slot."""
        self._assert_synced()
        opts.validate()

        path = f"/eth/v1/validator/blinded_blocks/{opts.slot}"
        response = await self._get(
            "/eth/v1/validator/blinded_blocks/{slot}", path, self._proposal_query(opts), timeout=opts.timeout
        )
        result = decode_versioned(
            response,
            VersionedBlindedProposal,
            endpoint=path,
            dynamic=await self._dynamic_ssz(),
            fallback_version=await self._fallback_version(response, opts.slot),
        )
        check_proposal(
            result.data,
            opts.slot,
            opts.randao_reveal,
            opts.graffiti,
            dvt_middleware=self.connected_to_dvt_middleware,
            kind="blinded beacon block proposal",
        )
        return result

    async def v3_proposal(self, opts: ProposalOpts) -> Response:
        """Full or blinded proposal from the v3 endpoint."""
        self._assert_synced()
        opts.validate()

        path = f"/eth/v3/validator/blocks/{opts.slot}"
        response = await self._get(
            "/eth/v3/validator/blocks/{slot}", path, self._proposal_query(opts, v3=True), timeout=opts.timeout
        )
        result = decode_v3_proposal(
            response,
            endpoint=path,
            dynamic=await self._dynamic_ssz(),
            fallback_version=await self._fallback_version(response, opts.slot),
        )
        check_proposal(
            result.data,
            opts.slot,
            opts.randao_reveal,
            opts.graffiti,
            dvt_middleware=self.connected_to_dvt_middleware,
            kind="v3 beacon block proposal",
        )
        return result

    # Blocks

    async def signed_beacon_block(self, opts: SignedBeaconBlockOpts) -> Response:
        self._assert_active()
        opts.validate()

        path = f"/eth/v2/beacon/blocks/{opts.block}"
        response = await self._get(
            "/eth/v2/beacon/blocks/{block_id}", path, timeout=opts.timeout, not_found=BlockNotFoundError
        )
        result = decode_versioned(
            response,
            VersionedSignedBeaconBlock,
            endpoint=path,
            dynamic=await self._dynamic_ssz(),
        )
        check_block_root(result.data, opts.expected_root)
        return result

    async def beacon_block_root(self, opts: BlockOpts) -> Response:
        self._assert_active()
        opts.validate()

        path = f"/eth/v1/beacon/blocks/{opts.block}/root"
        response = await self._get(
            "/eth/v1/beacon/blocks/{block_id}/root",
            path,
            timeout=opts.timeout,
            enforce_json=True,
            not_found=BlockNotFoundError,
        )
        result = decode_data(response, BlockRoot, endpoint=path, description="block root")
        return Response(data=result.data.root, metadata=result.metadata)

    async def beacon_block_header(self, opts: BlockOpts) -> Response:
        self._assert_active()
        opts.validate()

        path = f"/eth/v1/beacon/headers/{opts.block}"
        response = await self._get(
            "/eth/v1/beacon/headers/{block_id}",
            path,
            timeout=opts.timeout,
            enforce_json=True,
            not_found=BlockNotFoundError,
        )
        return decode_data(response, BeaconBlockHeader, endpoint=path, description="block header")

    async def blob_sidecars(self, opts: BlobSidecarsOpts) -> Response:
        self._assert_active()
        opts.validate()

        path = f"/eth/v1/beacon/blob_sidecars/{opts.block}"
        query = ""
        if opts.indices:
            query = "indices=" + ",".join(str(index) for index in opts.indices)
        response = await self._get(
            "/eth/v1/beacon/blob_sidecars/{block_id}",
            path,
            query,
            timeout=opts.timeout,
            not_found=BlockNotFoundError,
        )
        return decode_blob_sidecars(response, endpoint=path, dynamic=await self._dynamic_ssz())

    async def signed_execution_payload_envelope(self, opts: BlockOpts) -> Response:
        self._assert_active()
        opts.validate()

        path = f"/eth/v1/beacon/execution_payload/{opts.block}"
        response = await self._get(
            "/eth/v1/beacon/execution_payload/{block_id}",
            path,
            timeout=opts.timeout,
            not_found=BlockNotFoundError,
        )
        return decode_signed_execution_payload_envelope(
            response, endpoint=path, dynamic=await self._dynamic_ssz()
        )

    # Attestations

    async def attestation_data(self, opts: AttestationDataOpts) -> Response:
        self._assert_synced()

        path = "/eth/v1/validator/attestation_data"
        query = f"slot={opts.slot}&committee_index={opts.committee_index}"
        response = await self._get(path, path, query, timeout=opts.timeout)
        result = decode_data(response, AttestationData, endpoint=path, description="attestation data")
        check_attestation_data(result.data, opts.slot, opts.committee_index)
        return result

    async def aggregate_attestation(self, opts: AggregateAttestationOpts) -> Response:
        self._assert_active()
        opts.validate()

        path = "/eth/v2/validator/aggregate_attestation"
        query = (
            f"slot={opts.slot}&attestation_data_root={to_hex(bytes(opts.attestation_data_root))}"
            f"&committee_index={opts.committee_index}"
        )
        response = await self._get(path, path, query, timeout=opts.timeout)
        result = decode_versioned(
            response,
            VersionedAttestation,
            endpoint=path,
            dynamic=await self._dynamic_ssz(),
            fallback_version=await self._fallback_version(response, opts.slot),
        )
        check_aggregate_attestation(result.data, opts.slot, opts.attestation_data_root)
        return result

    # Submissions

    async def submit_proposal(self, opts: SubmitProposalOpts) -> None:
        """Publish a signed proposal, sent as JSON."""
        self._assert_active()
        opts.validate()
        proposal = opts.proposal
        if not isinstance(proposal, VersionedSignedProposal):
            raise InvalidOptionsError("proposal must be a VersionedSignedProposal")

        path = "/eth/v2/beacon/blocks"
        query = ""
        if opts.broadcast_validation:
            query = f"broadcast_validation={opts.broadcast_validation}"
        await self._post_json(
            path,
            path,
            to_json(proposal.data),
            query,
            headers={CONSENSUS_VERSION_HEADER: str(proposal.version)},
            timeout=opts.timeout,
        )

    async def submit_attestations(self, opts: SubmitAttestationsOpts) -> None:
        """Publish attestations, sent as JSON.

        From Electra attestations are submitted as SingleAttestation; an
        aggregate-style VersionedAttestation for Electra or later is rejected.
        """
        self._assert_active()
        opts.validate()

        versions = set()
        for attestation in opts.attestations:
            if isinstance(attestation, VersionedAttestation):
                if attestation.version >= ConsensusVersion.ELECTRA:
                    raise InvalidOptionsError(
                        f"{attestation.version} attestations must be submitted as single attestations"
                    )
            elif not isinstance(attestation, VersionedSingleAttestation):
                raise InvalidOptionsError(
                    f"unsupported attestation type {type(attestation).__name__}"
                )
            versions.add(attestation.version)
        if len(versions) != 1:
            raise InvalidOptionsError("attestations must all have the same version")

        path = "/eth/v2/beacon/pool/attestations"
        await self._post_json(
            path,
            path,
            [to_json(attestation.data) for attestation in opts.attestations],
            headers={CONSENSUS_VERSION_HEADER: str(versions.pop())},
            timeout=opts.timeout,
        )

    # Events

    async def events(self, topics: list[str], handler: EventHandler) -> EventStream:
        """Subscribe to node events; the stream runs until close().

        Raises:
            InvalidOptionsError: if no topics or an unsupported topic is given
        """
        self._assert_active()
        query = "&".join(f"topics={topic}" for topic in topics)
        stream = EventStream(
            self._ensure_session,
            url_for_call(self.base_url, "/eth/v1/events", query),
            topics,
            handler,
            reconnect_delay=self.config.event_reconnect_delay,
            metrics_enabled=self.config.metrics_enabled,
        )
        stream.start()
        self._event_streams.append(stream)
        return stream


__all__ = ["BeaconClient", "HOOKS"]
