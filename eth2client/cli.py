"""CLI entry point for eth2client."""

import asyncio
import logging
import sys
from typing import Optional

import click
import yaml

from .config import ClientConfig
from .exceptions import Eth2ClientError
from .spec.json_codec import parse_hex, to_json


def setup_logging(level: str) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if level.upper() != "DEBUG":
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def _echo_yaml(value) -> None:
    click.echo(yaml.safe_dump(to_json(value), sort_keys=False).rstrip())


def _spec_value(value):
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, (int, str, bool)) or value is None:
        return value
    if isinstance(value, (list, dict)):
        return to_json(value)
    return str(value)


def _run(config: ClientConfig, action) -> None:
    """Run `action(client)` against a started client, reporting errors on stderr."""

    # Imported here so SSZ types are built after the preset is chosen.
    from .beacon_api.client import BeaconClient

    async def runner():
        async with BeaconClient(config) as client:
            await action(client)

    try:
        asyncio.run(runner())
    except Eth2ClientError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(0)


@click.group()
@click.version_option(package_name="eth2client")
@click.option(
    "--address",
    default="http://localhost:5052",
    help="Beacon node REST API address",
    envvar="ETH2CLIENT_ADDRESS",
)
@click.option(
    "--timeout",
    default=10.0,
    type=float,
    help="Request timeout in seconds",
    envvar="ETH2CLIENT_TIMEOUT",
)
@click.option(
    "--json-only",
    is_flag=True,
    default=False,
    help="Only accept JSON responses (never request SSZ)",
    envvar="ETH2CLIENT_JSON_ONLY",
)
@click.option(
    "--custom-spec",
    is_flag=True,
    default=False,
    help="Size SSZ types from the node's chain spec",
    envvar="ETH2CLIENT_CUSTOM_SPEC",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level",
    envvar="ETH2CLIENT_LOG_LEVEL",
)
@click.option(
    "--preset",
    default="mainnet",
    type=click.Choice(["mainnet", "minimal"], case_sensitive=False),
    help="Preset to use (mainnet or minimal)",
    envvar="ETH2CLIENT_PRESET",
)
@click.option(
    "--metrics-port",
    default=None,
    type=int,
    help="Serve Prometheus metrics on this port",
    envvar="ETH2CLIENT_METRICS_PORT",
)
@click.pass_context
def cli(
    ctx: click.Context,
    address: str,
    timeout: float,
    json_only: bool,
    custom_spec: bool,
    log_level: str,
    preset: str,
    metrics_port: Optional[int],
):
    """eth2client - Ethereum beacon node API client."""
    setup_logging(log_level)

    from .spec.constants import set_preset
    set_preset(preset.lower())

    ctx.obj = ClientConfig(
        address=address,
        timeout=timeout,
        enforce_json=json_only,
        custom_spec_support=custom_spec,
        metrics_enabled=metrics_port is not None,
        log_level=log_level,
    )

    if metrics_port is not None:
        from . import metrics
        from .version import get_version
        metrics.start_metrics_server(metrics_port)
        metrics.set_client_info(get_version(), ctx.obj.address, preset.lower())


@cli.command("node-version")
@click.pass_obj
def node_version(config: ClientConfig):
    """Show the beacon node's software version."""

    async def action(client):
        click.echo((await client.node_version()).data)

    _run(config, action)


@cli.command()
@click.pass_obj
def spec(config: ClientConfig):
    """Show the beacon node's chain spec."""

    async def action(client):
        data = (await client.spec()).data
        click.echo(yaml.safe_dump(
            {key: _spec_value(value) for key, value in sorted(data.items())},
            sort_keys=False,
        ).rstrip())

    _run(config, action)


@cli.command()
@click.pass_obj
def genesis(config: ClientConfig):
    """Show genesis information."""

    async def action(client):
        _echo_yaml((await client.genesis()).data.to_dict())

    _run(config, action)


@cli.command()
@click.argument("block_id")
@click.pass_obj
def block(config: ClientConfig, block_id: str):
    """Show a signed beacon block."""
    from .beacon_api.opts import SignedBeaconBlockOpts

    async def action(client):
        response = await client.signed_beacon_block(SignedBeaconBlockOpts(block=block_id))
        click.echo(str(response.data).rstrip())

    _run(config, action)


@cli.command()
@click.argument("block_id")
@click.pass_obj
def header(config: ClientConfig, block_id: str):
    """Show a beacon block header."""
    from .beacon_api.opts import BlockOpts

    async def action(client):
        response = await client.beacon_block_header(BlockOpts(block=block_id))
        _echo_yaml(response.data.to_dict())

    _run(config, action)


@cli.command()
@click.argument("slot", type=int)
@click.option("--randao-reveal", required=True, help="0x-prefixed 96-byte RANDAO reveal")
@click.option("--graffiti", default="0x" + "00" * 32, help="0x-prefixed 32-byte graffiti")
@click.option("--blinded", is_flag=True, default=False, help="Request a blinded proposal")
@click.option("--v3", "use_v3", is_flag=True, default=False, help="Use the v3 proposal endpoint")
@click.option("--skip-randao-verification", is_flag=True, default=False)
@click.option("--builder-boost-factor", type=int, default=None)
@click.pass_obj
def proposal(
    config: ClientConfig,
    slot: int,
    randao_reveal: str,
    graffiti: str,
    blinded: bool,
    use_v3: bool,
    skip_randao_verification: bool,
    builder_boost_factor: Optional[int],
):
    """Request a block proposal for SLOT."""
    from .beacon_api.opts import ProposalOpts

    try:
        opts = ProposalOpts(
            slot=slot,
            randao_reveal=parse_hex(randao_reveal, "randao reveal"),
            graffiti=parse_hex(graffiti, "graffiti"),
            skip_randao_verification=skip_randao_verification,
            builder_boost_factor=builder_boost_factor,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    async def action(client):
        if use_v3:
            response = await client.v3_proposal(opts)
        elif blinded:
            response = await client.blinded_proposal(opts)
        else:
            response = await client.proposal(opts)
        click.echo(str(response.data).rstrip())

    _run(config, action)


@cli.command()
@click.argument("topics", nargs=-1, required=True)
@click.pass_obj
def events(config: ClientConfig, topics: tuple[str, ...]):
    """Stream events for TOPICS until interrupted."""

    def handler(event):
        click.echo(yaml.safe_dump({"topic": event.topic, "data": to_json(event.data)}, sort_keys=False))
        click.echo("---")

    async def action(client):
        await client.events(list(topics), handler)
        while True:
            await asyncio.sleep(3600)

    _run(config, action)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
