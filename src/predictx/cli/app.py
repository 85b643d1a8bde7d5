"""Root CLI app - entry point and command registration."""

from pathlib import Path

import typer

from predictx.config import get_settings
from predictx.config.settings import configure_logging
from predictx.errors import ConfigurationError

app = typer.Typer(
    name="predictx",
    help="PredictX - Back/lay prediction markets on a CosmWasm contract.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config_dir: Path | None = typer.Option(
        None, "--config-dir", "-C", help="Config directory (default: ./config or package config)"
    ),
    profile: str | None = typer.Option(
        None, "--profile", "-p", help="Config profile (e.g. testnet) to overlay on default.toml"
    ),
) -> None:
    """Configure logging and store options in context."""
    try:
        settings = get_settings(profile, config_dir)
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    configure_logging(settings)
    # Callers (tests) may pre-seed ctx.obj with a transport or wallet backend
    ctx.ensure_object(dict)
    ctx.obj.update(settings=settings, config_dir=config_dir, profile=profile)


# Subcommands registered from other modules
from predictx.cli import admin, api_cmd, bets, markets, resolve, wallet_cmd  # noqa: E402

app.add_typer(markets.app, name="markets")
app.add_typer(bets.app, name="bets")
app.add_typer(resolve.app, name="resolve")
app.add_typer(admin.app, name="admin")
app.add_typer(wallet_cmd.app, name="wallet")
app.add_typer(api_cmd.app, name="api")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
