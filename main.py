# main.py - Unified entry point for the Emoji Mint system
"""
Command line entry point.

Commands:
- translate: print the symbol encoding of a text
- preview: render the artifact preview image to a file
- mint: build, upload and mint a text against the local ledger emulator
  (an in-process EmojiNFT contract; nothing is sent to Celo)
- contract-info: show mint price and supply
- gallery: list the tokens owned by an address
"""
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from artifact.builder import ArtifactBuilder
from config.config_models import SystemConfig, load_config
from connector.local_ledger import LOCAL_ACCOUNT_ADDRESS, LOCAL_CONTRACT_ADDRESS, LocalLedger, LocalWallet
from coordinator.mint_pipeline import MintStatus
from coordinator.session import MintSession
from encoder.emoji_translator import EmojiTranslator
from monitoring import start_metrics_server
from utils.artifact_store import create_artifact_store, gateway_url
from utils.exceptions import EmojiMintError
from utils.logging_config import setup_logging
from vocabulary.symbol_dictionary import default_dictionary, load_dictionary

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = ".emoji-mint/ledger.json"

STATUS_ICONS = {
    MintStatus.IDLE: "⏸️",
    MintStatus.UPLOADING: "📤",
    MintStatus.MINTING: "⛓️",
    MintStatus.SUCCESS: "✅",
    MintStatus.FAILED: "❌",
}


def _echo_status(status: MintStatus, pipeline) -> None:
    outcome = pipeline.outcome
    if status is MintStatus.FAILED and outcome is not None and outcome.fate_unknown:
        click.echo("⏳ Unknown")
        return
    click.echo(f"{STATUS_ICONS[status]} {status.value.capitalize()}")


def _translator(config: SystemConfig) -> EmojiTranslator:
    if config.dictionary_path:
        return EmojiTranslator(load_dictionary(config.dictionary_path))
    return EmojiTranslator(default_dictionary())


def _local_ledger(config: SystemConfig, state_file: str) -> LocalLedger:
    address = config.ledger.contract_address if config.ledger.is_deployed else LOCAL_CONTRACT_ADDRESS
    return LocalLedger.load(
        state_file,
        contract_address=address,
        mint_price_wei=config.ledger.default_mint_price_wei,
        max_supply=config.ledger.default_max_supply,
    )


def _session(config: SystemConfig, ledger: LocalLedger, address: Optional[str]) -> MintSession:
    return MintSession(
        translator=_translator(config),
        builder=ArtifactBuilder(config=config.artifact),
        storage=create_artifact_store(config.storage),
        ledger=ledger,
        wallet=LocalWallet(ledger, address=address),
        config=config,
    )


@click.group()
@click.version_option(version='0.1.0')
@click.option('--config', 'config_path', type=click.Path(exists=True), help='Configuration file (YAML or JSON)')
@click.option('--log-level', default=None, help='Override the configured log level')
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[str], log_level: Optional[str]):
    """
    Emoji Mint - turn text into emoji and mint it as an NFT on Celo
    """
    try:
        config = load_config(config_path)
    except (ValueError, EmojiMintError) as e:
        raise click.ClickException(f"Invalid configuration: {e}")
    level = (log_level or config.monitoring.log_level).upper()
    setup_logging(log_dir=config.monitoring.log_dir, log_level=level)
    ctx.obj = config


@cli.command()
@click.argument('text')
@click.pass_obj
def translate(config: SystemConfig, text: str):
    """Translate TEXT into emoji"""
    translation = _translator(config).translate(text)
    click.echo(translation.encoded_text)


@cli.command()
@click.argument('text')
@click.option('--out', 'out_path', default='emoji-nft.png', type=click.Path(dir_okay=False), help='Output PNG path')
@click.option('--theme', type=click.Choice(['light', 'dark']), default=None, help='Preview theme')
@click.pass_obj
def preview(config: SystemConfig, text: str, out_path: str, theme: Optional[str]):
    """Render the artifact preview image for TEXT"""
    translation = _translator(config).translate(text)
    try:
        image = ArtifactBuilder(config=config.artifact).preview(
            translation.original_text, translation.encoded_text, theme
        )
    except EmojiMintError as e:
        click.echo(f"❌ Preview failed: {e}")
        sys.exit(1)
    Path(out_path).write_bytes(image)
    click.echo(f"🖼️  {translation.encoded_text}")
    click.echo(f"💾 Preview saved to {out_path}")


@cli.command()
@click.argument('text')
@click.option('--creator', default=LOCAL_ACCOUNT_ADDRESS, help='Address that will own the token')
@click.option('--theme', type=click.Choice(['light', 'dark']), default=None, help='Preview theme')
@click.option('--state-file', default=DEFAULT_STATE_FILE, type=click.Path(dir_okay=False), help='Local ledger state')
@click.option('--metrics-port', type=int, default=None, help='Expose Prometheus metrics on this port')
@click.pass_obj
def mint(config: SystemConfig, text: str, creator: str, theme: Optional[str],
         state_file: str, metrics_port: Optional[int]):
    """
    Mint TEXT as an emoji NFT on the local ledger emulator.

    Transactions never reach Celo: an in-process EmojiNFT contract, persisted
    in --state-file, stands in for the chain. Storage uploads go to the
    configured backend.
    """
    port = metrics_port or config.monitoring.metrics_port
    if port:
        start_metrics_server(port)

    ledger = _local_ledger(config, state_file)
    session = _session(config, ledger, creator)
    session.add_listener(_echo_status)

    async def _run():
        try:
            await session.refresh_contract_info()
            return await session.mint(text, theme)
        finally:
            await session.storage.aclose()

    translation = session.translate(text)
    click.echo(f"🔤 Text: {translation.original_text}")
    click.echo(f"✨ Emoji: {translation.encoded_text}")

    outcome = asyncio.run(_run())
    ledger.save(state_file)

    if outcome.ok:
        click.echo(f"🆔 Token: #{outcome.token_id}")
        click.echo(f"🔗 Transaction: {outcome.transaction_hash}")
        click.echo(f"📦 Metadata: {gateway_url(outcome.storage_locator, config.storage.gateway_url)}")
        return

    if outcome.fate_unknown:
        click.echo(f"⏳ Mint status unknown, check explorer: {outcome.reason}")
        click.echo(f"🔗 Transaction: {outcome.transaction_hash}")
        click.echo("⚠️  The transaction may still confirm; check the explorer before retrying")
        sys.exit(1)

    click.echo(f"❌ Mint failed at {outcome.stage.value}: {outcome.reason}")
    if outcome.funds_may_be_spent:
        click.echo("⚠️  Funds may have been spent")
    sys.exit(1)


@cli.command('contract-info')
@click.option('--state-file', default=DEFAULT_STATE_FILE, type=click.Path(dir_okay=False), help='Local ledger state')
@click.pass_obj
def contract_info(config: SystemConfig, state_file: str):
    """Show mint price and supply"""
    ledger = _local_ledger(config, state_file)
    session = _session(config, ledger, None)
    snapshot = asyncio.run(session.refresh_contract_info())
    if snapshot is None:
        click.echo("❌ Contract not deployed")
        sys.exit(1)

    def _show(value):
        return "unavailable" if value is None else value

    click.echo(f"📜 Contract: {snapshot.contract_address}")
    click.echo(f"💰 Mint price: {_show(snapshot.mint_price_display)} CELO")
    click.echo(f"📊 Minted: {_show(snapshot.total_supply)} / {_show(snapshot.max_supply)}")
    click.echo(f"🎟️  Remaining: {_show(snapshot.remaining_supply)}")


@cli.command()
@click.option('--owner', default=LOCAL_ACCOUNT_ADDRESS, help='Address whose tokens to list')
@click.option('--state-file', default=DEFAULT_STATE_FILE, type=click.Path(dir_okay=False), help='Local ledger state')
@click.pass_obj
def gallery(config: SystemConfig, owner: str, state_file: str):
    """List the emoji NFTs owned by an address"""
    ledger = _local_ledger(config, state_file)
    session = _session(config, ledger, owner)
    tokens = asyncio.run(session.gallery(owner))
    if tokens is None:
        click.echo("❌ Could not read tokens from the ledger")
        sys.exit(1)
    if not tokens:
        click.echo("🎨 No emoji NFTs yet")
        return
    for token in tokens:
        click.echo(f"#{token.token_id}  {token.encoded_text}  \"{token.original_text}\"  {token.storage_locator}")


if __name__ == '__main__':
    cli()
