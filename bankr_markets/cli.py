"""
CLI Entry Point for Bankr Markets.

Commands:
  key        - Save, show (masked) or clear the API key
  balances   - Show wallet balances
  search     - Search Polymarket
  odds       - Odds for one market
  positions  - Open Polymarket positions
  bet        - Place a bet (real money)
  redeem     - Redeem winning positions
  ask        - Send any prompt to the agent
  config     - Show current configuration
"""

import asyncio
import logging

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from bankr_markets import __version__
from bankr_markets.agent import BankrAgent
from bankr_markets.config import AppConfig
from bankr_markets.credentials import DotenvCredentialStore, mask_credential
from bankr_markets.errors import (
    BankrError,
    JobFailed,
    JobTimeout,
    MissingCredential,
    StorageError,
    SubmissionFailed,
)

console = Console()


def describe_error(error: BankrError) -> tuple[str, str]:
    """Title and message shown to the user for a failed command."""
    if isinstance(error, MissingCredential):
        return "No API key", "No API key configured. Run `bankr key set` first."
    if isinstance(error, SubmissionFailed):
        status = error.status_code if error.status_code is not None else "no response"
        return "Request rejected", f"The agent API refused the request ({status}):\n{error.body}"
    if isinstance(error, JobFailed):
        return "Failed", error.message
    if isinstance(error, JobTimeout):
        return (
            "Timed out",
            f"No answer for job {error.job_id} after {error.attempts} checks. "
            "The outcome is unknown: check your positions before retrying.",
        )
    if isinstance(error, StorageError):
        return "Storage error", str(error)
    return "Error", str(error)


def _config(ctx) -> AppConfig:
    return ctx.obj.setdefault("config", AppConfig())


def _store(ctx):
    if ctx.obj.get("credentials") is not None:
        return ctx.obj["credentials"]
    cfg = _config(ctx)
    return DotenvCredentialStore(cfg.credentials.store_path, key_name=cfg.credentials.key_name)


def _fail(error: BankrError):
    title, message = describe_error(error)
    console.print(Panel(Text(message), title=f"[bold red]{title}[/bold red]"))
    raise SystemExit(1)


def _run(ctx, action):
    """Run `action(agent)` on a fresh agent and return what it returns."""
    factory = ctx.obj.get("agent_factory", BankrAgent)

    async def go():
        async with factory(_config(ctx), credentials=_store(ctx)) as agent:
            return await action(agent)

    try:
        return asyncio.run(go())
    except ValueError as e:
        raise click.UsageError(str(e))
    except BankrError as e:
        _fail(e)


def _show(title: str, text: str):
    console.print(Panel(Text(text or "(empty response)"), title=f"[bold]{title}[/bold]"))


@click.group()
@click.version_option(version=__version__, prog_name="bankr")
@click.option("-v", "--verbose", is_flag=True, help="Log HTTP and polling activity")
@click.pass_context
def cli(ctx, verbose):
    """Bankr Markets - Polymarket through the Bankr agent."""
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def key():
    """Manage the stored API key."""


@key.command("set")
@click.option("--api-key", prompt="Bankr API key", hide_input=True, help="Key to store")
@click.pass_context
def key_set(ctx, api_key):
    """Save the API key."""
    api_key = api_key.strip()
    if not api_key:
        raise click.BadParameter("Please enter a valid API key", param_hint="--api-key")
    try:
        _store(ctx).set(api_key)
    except StorageError as e:
        _fail(e)
    console.print(f"[green]API key saved[/green] ({mask_credential(api_key)})")


@key.command("show")
@click.pass_context
def key_show(ctx):
    """Show whether a key is stored (masked)."""
    try:
        stored = _store(ctx).get()
    except StorageError as e:
        _fail(e)
    if stored:
        console.print(f"API key: [cyan]{mask_credential(stored)}[/cyan]")
    else:
        console.print("[yellow]No API key configured.[/yellow]")


@key.command("clear")
@click.confirmation_option(
    prompt="Clear the API key? You will need to re-enter it to use bankr."
)
@click.pass_context
def key_clear(ctx):
    """Remove the stored API key."""
    try:
        _store(ctx).clear()
    except StorageError as e:
        _fail(e)
    console.print("[green]API key cleared.[/green]")


@cli.command()
@click.pass_context
def balances(ctx):
    """Show wallet balances."""
    _show("Balances", _run(ctx, lambda agent: agent.polymarket.get_balances()))


@cli.command()
@click.argument("term")
@click.pass_context
def search(ctx, term):
    """Search Polymarket for TERM."""
    _show(f"Search: {term}", _run(ctx, lambda agent: agent.polymarket.search_markets(term)))


@cli.command()
@click.argument("market")
@click.pass_context
def odds(ctx, market):
    """Show the odds for MARKET."""
    _show(f"Odds: {market}", _run(ctx, lambda agent: agent.polymarket.get_market_odds(market)))


@cli.command()
@click.pass_context
def positions(ctx):
    """Show open Polymarket positions."""
    _show("Positions", _run(ctx, lambda agent: agent.polymarket.get_positions()))


@cli.command()
@click.argument("amount", type=float)
@click.argument("position")
@click.argument("market")
@click.confirmation_option(prompt="This places a bet with REAL MONEY. Continue?")
@click.pass_context
def bet(ctx, amount, position, market):
    """Bet AMOUNT dollars on POSITION for MARKET."""
    result = _run(ctx, lambda agent: agent.polymarket.place_bet(amount, position, market))
    _show("Bet placed", result)


@cli.command()
@click.confirmation_option(prompt="Redeem all winning positions?")
@click.pass_context
def redeem(ctx):
    """Redeem winning Polymarket positions."""
    _show("Redeemed", _run(ctx, lambda agent: agent.polymarket.redeem_winnings()))


@cli.command()
@click.argument("prompt")
@click.option("--thread-id", default=None, help="Continue an earlier conversation")
@click.pass_context
def ask(ctx, prompt, thread_id):
    """Send PROMPT to the agent as-is."""
    result = _run(ctx, lambda agent: agent.ask(prompt, thread_id))
    _show("Agent", result.text)
    if result.thread_id:
        console.print(f"[dim]thread: {result.thread_id}[/dim]")


@cli.command()
@click.pass_context
def config(ctx):
    """Show current configuration."""
    cfg = _config(ctx)
    try:
        has_key = _store(ctx).has()
    except StorageError as e:
        _fail(e)

    try:
        policy = repr(cfg.polling.build_policy())
    except ValueError as e:
        policy = f"[red]{e}[/red]"

    console.print(Panel(
        f"API URL: {cfg.api.base_url}\n"
        f"Auth Header: {cfg.api.api_key_header}\n"
        f"Request Timeout: {cfg.api.request_timeout:.0f}s\n"
        f"Poll Policy: {policy}\n"
        f"Credentials File: {cfg.credentials.store_path}\n"
        f"API Key: {'Configured' if has_key else 'Not set'}",
        title="[bold]Bankr Configuration[/bold]",
    ))


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
