"""
Command-line entry point.

Usage:
  qrscan scan ./ticket.png
  qrscan scan ./ticket.png --decoder zbar --json --pretty
  qrscan parse "WIFI:T:WPA;S:Home;P:secret;H:false;"
"""

from __future__ import annotations

import json
import logging
import mimetypes
import sys
from pathlib import Path

import click
import sentry_sdk

from . import config
from .content.actions import format_for_display, parse_content
from .models import ParsedResult
from .qr_scanner.decoder import get_decoder
from .qr_scanner.qr_engine import process_qr_image

EXIT_REJECTED = 1
EXIT_NOT_FOUND = 2


def _setup(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stderr)
    if config.SENTRY_DSN:
        sentry_sdk.init(dsn=config.SENTRY_DSN, traces_sample_rate=0.2)


def _echo_parsed(parsed: ParsedResult) -> None:
    click.echo(f"Type: {parsed.type.value}")
    click.echo(format_for_display(parsed))
    if parsed.actions:
        click.echo("")
        click.echo("Actions:")
        for action in parsed.actions:
            click.echo(f"  [{action.kind.value}] {action.label}: {action.value}")


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Debug logging (every strategy attempt).")
def main(verbose: bool) -> None:
    """Read QR codes from images and turn them into actionable data."""
    _setup(verbose)


@main.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--decoder",
    "decoder_name",
    type=click.Choice(["opencv", "zbar"]),
    default=None,
    help="Pattern decoder backend (default from QRSCAN_DECODER).",
)
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON.")
@click.option("--pretty", is_flag=True, help="Indent JSON output.")
@click.option("--quiet", "-q", is_flag=True, help="Do not print progress.")
def scan(image: Path, decoder_name: str | None, as_json: bool, pretty: bool, quiet: bool) -> None:
    """Decode the QR code in IMAGE."""
    mime, _ = mimetypes.guess_type(image.name)

    try:
        decoder = get_decoder(decoder_name or config.DECODER_BACKEND)
    except (RuntimeError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc

    def on_progress(progress: int, strategy: str) -> None:
        if not quiet:
            click.echo(f"[{min(progress, 95):3d}%] {strategy}", err=True)

    result = process_qr_image(image.read_bytes(), mime=mime, decoder=decoder, on_progress=on_progress)

    if not quiet and result["qr_found"]:
        click.echo("[100%] Done", err=True)

    if as_json:
        click.echo(json.dumps(result, indent=2 if pretty else None, ensure_ascii=False))
    elif result["error"]:
        click.echo(f"ERROR: {result['error']}", err=True)
    elif not result["qr_found"]:
        click.echo("No QR code found. Try a sharper or better-lit image.", err=True)
    else:
        click.echo(f"Decoded with: {result['strategy']}")
        # parsing is deterministic, so re-parse the raw payload for display
        _echo_parsed(parse_content(result["content"]["raw"]))

    if result["error"]:
        sys.exit(EXIT_REJECTED)
    if not result["qr_found"]:
        sys.exit(EXIT_NOT_FOUND)


@main.command()
@click.argument("text")
@click.option("--json", "as_json", is_flag=True, help="Print the parsed result as JSON.")
@click.option("--pretty", is_flag=True, help="Indent JSON output.")
def parse(text: str, as_json: bool, pretty: bool) -> None:
    """Classify and parse a decoded TEXT payload."""
    parsed = parse_content(text)
    if as_json:
        click.echo(json.dumps(parsed.model_dump(mode="json"), indent=2 if pretty else None, ensure_ascii=False))
    else:
        _echo_parsed(parsed)


if __name__ == "__main__":
    main()
