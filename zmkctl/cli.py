"""Typer CLI entrypoint."""

from __future__ import annotations

import errno
import logging

import typer

from zmkctl.core import results
from zmkctl.core.errors import InvalidArgument, ZmkctlError
from zmkctl.core.service import ZmkService

USAGE = """zmkctl: Interact with ZMK keyboard
commands:
\tlist_devices: list all connected devices in a JSON array
\tread_features <serial>: read keyboard with serial <serial> features
\tread_key <serial> <layer> <key_idx>: read key data from keyboard with <serial>
\t\tin layer <layer>, key number <key_idx>"""

app = typer.Typer(
    help="Read settings from ZMK keyboards over HID feature reports",
    invoke_without_command=True,
    add_completion=False,
)


def _configure_logging(verbose: int) -> None:
    if verbose >= 2:
        logging.basicConfig(level=logging.DEBUG, format="[%(levelname)s] %(name)s: %(message)s")
    elif verbose == 1:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    else:
        logging.basicConfig(level=logging.ERROR)


def _build_service() -> ZmkService:
    service = ZmkService()
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _fail(message: str, exc: ZmkctlError) -> typer.Exit:
    typer.echo(f"Error: {exc}", err=True)
    typer.echo(message, err=True)
    code = errno.EINVAL if isinstance(exc, InvalidArgument) else errno.EIO
    return typer.Exit(code=code)


def _usage_error(message: str) -> typer.Exit:
    typer.echo(f"Error, {message}", err=True)
    return typer.Exit(code=errno.EINVAL)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log output"),
) -> None:
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(USAGE)
        raise typer.Exit(code=errno.EINVAL)


@app.command("help")
def show_help() -> None:
    """Print command usage."""
    typer.echo(USAGE)


@app.command("list_devices")
def list_devices() -> None:
    """List all connected devices in a JSON array."""
    try:
        service = _build_service()
        output = results.to_json(results.device_list_record(service.list_devices()))
    except ZmkctlError as exc:
        raise _fail("Could not get device list", exc) from None
    typer.echo(output)


@app.command("read_features")
def read_features(serial: str | None = typer.Argument(None)) -> None:
    """Read the feature report of the keyboard with SERIAL."""
    if serial is None:
        raise _usage_error("device serial required")
    try:
        service = _build_service()
        output = results.to_json(results.functions_record(service.read_features(serial)))
    except ZmkctlError as exc:
        raise _fail("Could not get keyboard features", exc) from None
    typer.echo(output)


@app.command("read_key", context_settings={"ignore_unknown_options": True})
def read_key(
    serial: str | None = typer.Argument(None),
    layer: int | None = typer.Argument(None),
    key_idx: int | None = typer.Argument(None),
) -> None:
    """Read key data for key KEY_IDX in LAYER of the keyboard with SERIAL."""
    if serial is None or layer is None or key_idx is None:
        raise _usage_error("device serial, layer, and key required")
    try:
        service = _build_service()
        output = results.to_json(results.key_data_record(service.read_key(serial, layer, key_idx)))
    except ZmkctlError as exc:
        raise _fail("Could not get key data", exc) from None
    typer.echo(output)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
