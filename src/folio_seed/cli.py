"""
folio-seed command line

Inspect record layouts, encode/decode single records and push ledger
snapshots to a local validator.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .codec import LAYOUTS, decode_record, encode_record, field_offsets, record_from_json, record_to_json
from .config import SeederConfig
from .errors import SeedError
from .fixtures_io import dump_yaml, ledger_from_json, load_document
from .remote import RemoteLedger
from .state_digest import compute_ledger_digest

logger = logging.getLogger(__name__)

KIND_CHOICE = click.Choice([kind.value for kind in LAYOUTS])


def _fail(e: SeedError) -> None:
    logger.error(str(e))
    sys.exit(1)


@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Folio account-state codec and ledger seeding tools."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    config = SeederConfig.from_env()
    if verbose:
        config.verbose = True
    if config.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    ctx.obj = config


@main.command()
def kinds() -> None:
    """List every record kind with its discriminator, owner and size."""
    for kind, layout in LAYOUTS.items():
        size = str(layout.account_size) if layout.account_size is not None else "variable"
        disc = layout.discriminator.hex() or "-"
        click.echo(f"{kind.value:<22} {disc:<16} {size:>8}  {layout.owner}")


@main.command()
@click.argument("kind", type=KIND_CHOICE)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def encode(kind: str, path: Path) -> None:
    """Encode the record in PATH (YAML or JSON) and print it as hex."""
    try:
        record = record_from_json(load_document(path), kind)
        click.echo(encode_record(record).hex())
    except SeedError as e:
        _fail(e)


@main.command()
@click.argument("data")
@click.option("--kind", type=KIND_CHOICE, default=None, help="Record kind (detected when omitted)")
def decode(data: str, kind: Optional[str]) -> None:
    """Decode hex DATA and print the record as YAML."""
    try:
        raw = bytes.fromhex(data.removeprefix("0x"))
    except ValueError:
        raise click.BadParameter("not a hex string", param_hint="DATA")
    try:
        click.echo(dump_yaml(record_to_json(decode_record(raw, kind))), nl=False)
    except SeedError as e:
        _fail(e)


@main.command()
@click.argument("kind", type=KIND_CHOICE)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def layout(kind: str, path: Path) -> None:
    """Print the field offset table for the record in PATH."""
    try:
        record = record_from_json(load_document(path), kind)
        rows = field_offsets(record)
    except SeedError as e:
        _fail(e)
        return
    click.echo(f"{'offset':>6} {'size':>6}  field")
    for name, offset, size in rows:
        click.echo(f"{offset:>6} {size:>6}  {name}")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def digest(path: Path) -> None:
    """Print the state digest of the ledger snapshot in PATH."""
    try:
        click.echo(compute_ledger_digest(ledger_from_json(load_document(path))))
    except SeedError as e:
        _fail(e)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--endpoint", default=None, help="Validator JSON-RPC URL")
@click.pass_obj
def push(config: SeederConfig, path: Path, endpoint: Optional[str]) -> None:
    """Push every account of the ledger snapshot in PATH to a validator."""
    if endpoint:
        config.rpc_endpoint = endpoint

    async def run() -> int:
        async with RemoteLedger(config) as remote:
            return await remote.push_ledger(ledger_from_json(load_document(path)))

    try:
        count = asyncio.run(run())
    except SeedError as e:
        _fail(e)
        return
    click.echo(f"pushed {count} accounts")


if __name__ == "__main__":
    main()
