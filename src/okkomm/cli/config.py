"""CLI: okkomm config set|show"""

from typing import Optional

import click
from rich.console import Console

console = Console()


def _load_config() -> dict:
    from okkomm.cli.main import _load_config
    return _load_config()


def _save_config(cfg: dict) -> None:
    from okkomm.cli.main import _save_config
    _save_config(cfg)


@click.group()
def config():
    """Endpoint configuration."""


@config.command("set")
@click.option("--url", default=None, help="OK.KOMM KomService URL")
@click.option("--cert", "certs", multiple=True, type=click.Path(exists=True, dir_okay=False), help="Extra PEM root certificate")
@click.option("--timeout", default=None, type=float)
def config_set(url: Optional[str], certs: tuple, timeout: Optional[float]):
    """Store endpoint settings."""
    cfg = _load_config()
    if url:
        cfg["url"] = url
    if certs:
        cfg["certificates"] = [str(click.format_filename(c)) for c in certs]
    if timeout is not None:
        cfg["timeout"] = timeout
    _save_config(cfg)
    console.print("[green]Saved to ~/.okkomm/config.json[/green]")


@config.command("show")
def config_show():
    """Show stored endpoint settings."""
    cfg = _load_config()
    if not cfg.get("url"):
        console.print("[yellow]No endpoint configured.[/yellow]")
        return
    console.print(f"URL: {cfg['url']}")
    for cert in cfg.get("certificates", []):
        console.print(f"Certificate: {cert}")
    if "timeout" in cfg:
        console.print(f"Timeout: {cfg['timeout']}s")
