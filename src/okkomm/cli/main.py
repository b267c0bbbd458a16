"""
OK.KOMM CLI: the `okkomm` command.

Commands:
  okkomm config set|show   Endpoint and trusted root certificates
  okkomm build <payload>   Print the SOAP request for a payload file
  okkomm decode <reply>    Decode a saved SOAP reply
  okkomm send <payload>    Send a payload and print the reply fragment
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install okkomm[cli]")

from okkomm.client import OkKommClient

console = Console()
CONFIG_FILE = Path.home() / ".okkomm" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _get_client(url: Optional[str] = None) -> OkKommClient:
    cfg = _load_config()
    url = url or cfg.get("url")
    if not url:
        console.print("[red]No endpoint configured. Run `okkomm config set --url ...` first.[/red]")
        raise SystemExit(1)
    certs = [Path(p).read_bytes() for p in cfg.get("certificates", [])]
    return OkKommClient(url, tls_root_certificates=certs or None, timeout=cfg.get("timeout", 30.0))


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def main(verbose: bool):
    """OK.KOMM CLI: ZKOCXML requests over SOAP."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


# Register subcommands from separate modules
from okkomm.cli.config import config
from okkomm.cli.messages import build_cmd, decode_cmd, send_cmd

main.add_command(config)
main.add_command(build_cmd)
main.add_command(decode_cmd)
main.add_command(send_cmd)


if __name__ == "__main__":
    main()
