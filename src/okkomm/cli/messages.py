"""CLI: okkomm build, okkomm decode, okkomm send"""

import json
import mimetypes
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from okkomm.client import OkKommAktion, OkKommClient, decode_response
from okkomm.models.payloads import ContentContainerAttachment, RawRequest

console = Console()


def _get_client(url: Optional[str] = None) -> OkKommClient:
    from okkomm.cli.main import _get_client
    return _get_client(url)


def _run(coro):
    from okkomm.cli.main import _run
    return _run(coro)


def _action_options(f):
    f = click.option("--ziel-ags", default="", help="Target AGS (AKT_ZIEL_AGS / APPS_AGS)")(f)
    f = click.option("--ausfuehrung", default="", help="Execution mode (AKT_AUSFUEHRUNG)")(f)
    f = click.option("--typ", default="", help="Action type (AKT_TYP)")(f)
    f = click.option("--verfahren", default="", help="Procedure (AKT_VERFAHREN)")(f)
    f = click.option("--mode", type=click.Choice(["inline", "base64", "container"]), default="inline")(f)
    f = click.option("--ref-id", default="", help="Message refId in container mode")(f)
    f = click.option(
        "--attachment", "attachments", multiple=True,
        type=click.Path(exists=True, dir_okay=False), help="Attachment file in container mode",
    )(f)
    return f


def _attachments(paths: tuple) -> list[ContentContainerAttachment]:
    result = []
    for path in paths:
        p = Path(path)
        content_type = mimetypes.guess_type(p.name)[0] or "application/octet-stream"
        result.append(ContentContainerAttachment(content_type=content_type, ref_id=p.name, content=p.read_bytes()))
    return result


def _build(client: OkKommClient, payload: Path, mode: str, ref_id: str, attachments: tuple, **action) -> bytes:
    info = OkKommAktion(**action)
    body = RawRequest(payload.read_text(encoding="utf-8"))
    if mode == "base64":
        return client.request_xml_base64(info, body)
    if mode == "container":
        return client.request_xml_in_content_container(info, body, _attachments(attachments), ref_id)
    return client.request(info, body)


@click.command("build")
@click.argument("payload", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_action_options
def build_cmd(payload: Path, mode, ref_id, attachments, **action):
    """Print the SOAP request for PAYLOAD without sending it."""
    message = _build(OkKommClient(""), payload, mode, ref_id, attachments, **action)
    click.echo(message.decode("utf-8"))


def _print_reply(info, fragment: Optional[str], json_output: bool) -> None:
    if json_output:
        click.echo(json.dumps({
            "info": info.model_dump(by_alias=True) if info is not None else None,
            "fragment": fragment,
        }, indent=2))
        return
    if info is None:
        console.print("[yellow]Reply carries no ZKOCXML payload.[/yellow]")
        return
    system = info.system
    table = Table(title="ZKOCXML")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for section in (system.aktion, system.antwort, system.apps_info):
        if section is None:
            continue
        for name, field in type(section).model_fields.items():
            value = getattr(section, name)
            if isinstance(value, str):
                table.add_row(field.alias or name, value)
    console.print(table)
    error = info.error()
    if error is not None:
        console.print(f"[red]Error {error.typ}: {error.text}[/red] [dim]({error.feld}={error.wert})[/dim]")
    if fragment is not None:
        console.print(fragment, markup=False, highlight=False)


@click.command("decode")
@click.argument("reply", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json-output", "--json", is_flag=True)
def decode_cmd(reply: Path, json_output: bool):
    """Decode a saved SOAP REPLY: metadata, reported error and DATEN fragment."""
    info, fragment = decode_response(reply.read_bytes())
    _print_reply(info, fragment, json_output)


@click.command("send")
@click.argument("payload", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_action_options
@click.option("--url", default=None, help="Override the configured endpoint")
@click.option("--json-output", "--json", is_flag=True)
def send_cmd(payload: Path, mode, ref_id, attachments, url, json_output, **action):
    """Send PAYLOAD to OK.KOMM and print the reply."""

    client = _get_client(url)

    async def _send():
        async with client:
            message = _build(client, payload, mode, ref_id, attachments, **action)
            with console.status("Calling OK.KOMM..."):
                return await client.http.post(message)

    info, fragment = decode_response(_run(_send()))
    _print_reply(info, fragment, json_output)
