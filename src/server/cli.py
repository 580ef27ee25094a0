"""Click CLI for running and exercising the webhook receiver."""

from __future__ import annotations

import json
from pathlib import Path

import click
import httpx
import uvicorn

from src.webhook.signature import SIGNATURE_HEADER, compute_signature


@click.group()
def cli() -> None:
    """WhatsApp webhook relay CLI."""


@cli.command()
@click.option("--host", default="0.0.0.0", help="Bind address.")
@click.option("--port", default=8000, type=int, help="Bind port.")
def serve(host: str, port: int) -> None:
    """Run the webhook receiver with configuration from the environment."""
    uvicorn.run(
        "src.server.app:create_app_from_env",
        factory=True,
        host=host,
        port=port,
    )


@cli.command()
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--secret", envvar="WHATSAPP_WEBHOOK_SECRET", default=None,
    help="Shared webhook secret (defaults to WHATSAPP_WEBHOOK_SECRET).",
)
def sign(payload_file: Path, secret: str | None) -> None:
    """Print the x-webhook-signature value for a payload file."""
    if not secret:
        raise click.UsageError("A secret is required (--secret or WHATSAPP_WEBHOOK_SECRET)")
    click.echo(compute_signature(secret, payload_file.read_bytes()))


@cli.command("send-test")
@click.argument("url")
@click.option(
    "--secret", envvar="WHATSAPP_WEBHOOK_SECRET", default=None,
    help="Sign the request with this secret.",
)
@click.option("--message", default="Test webhook", help="Text carried in data.message.")
@click.option("--timeout", default=10.0, type=float, help="Request timeout in seconds.")
@click.pass_context
def send_test(
    ctx: click.Context, url: str, secret: str | None, message: str, timeout: float,
) -> None:
    """Post a webhook.test event to a running receiver."""
    body = json.dumps(
        {"event": "webhook.test", "data": {"message": message}},
        separators=(",", ":"),
    ).encode()
    headers = {"Content-Type": "application/json"}
    if secret:
        headers[SIGNATURE_HEADER] = compute_signature(secret, body)

    try:
        resp = httpx.post(url, content=body, headers=headers, timeout=timeout)
    except httpx.HTTPError as exc:
        click.echo(f"Request failed: {exc}", err=True)
        ctx.exit(1)

    click.echo(f"{resp.status_code} {resp.text}")
    if not 200 <= resp.status_code < 300:
        ctx.exit(1)
