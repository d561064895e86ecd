"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
import os

import typer
from typer.core import TyperGroup

from bleutil.core.errors import BleutilError, DeviceNotFoundError
from bleutil.core.service import BleService
from bleutil.core.session import format_bytes

HELP_MSG = """bleutil - Bluetooth Low Energy command-line utility

Usage:
    bleutil [-v] <command> <args>

Commands:
    scan                 scan for and print nearby devices
    ping <addr>          connect to device and print its services and characteristics
    read <addr> <char>   connect to the device and read the value of the characteristic
    write <addr> <char>  connect to the device and write stdin to the characteristic
    write -i <addr>      write each stdin line to the UART RX characteristic and read the TX reply
    help                 print this help message

Options:
    --window SECONDS     override the configured scan window
    -v, --verbose        enable debug logging
"""


def _usage(message: str) -> None:
    typer.echo(f"{message}\n", err=True)
    typer.echo(HELP_MSG, err=True)


class _HelpFallbackGroup(TyperGroup):
    def resolve_command(self, ctx: typer.Context, args: list[str]):
        if args and self.get_command(ctx, args[0]) is None and not args[0].startswith("-"):
            _usage(f"Unrecognized command '{args[0]}'")
            ctx.exit(0)
        return super().resolve_command(ctx, args)


app = typer.Typer(
    cls=_HelpFallbackGroup,
    help="Scan, inspect, read and write Bluetooth Low Energy peripherals",
    invoke_without_command=True,
)

_WINDOW_HELP = "Scan window in seconds (defaults to the configured value)"


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    level_name = os.environ.get("BLEUTIL_LOG_LEVEL", "WARNING").upper()
    level = logging.DEBUG if verbose else getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
    )
    if verbose:
        logging.getLogger("bleutil").setLevel(logging.DEBUG)
    if ctx.invoked_subcommand is None:
        _usage("No command specified")


def _build_service() -> BleService:
    service = BleService(echo=typer.echo)
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _fail(exc: BleutilError) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1) from None


@app.command("scan")
def scan(
    window: float | None = typer.Option(None, "--window", min=0.0, help=_WINDOW_HELP),
) -> None:
    """Scan for and print nearby devices."""
    try:
        service = _build_service()
        for device in service.scan(window):
            typer.echo(f"{device.address}: {device.display_name}")
    except BleutilError as exc:
        _fail(exc)


@app.command("ping")
def ping(
    address: str,
    window: float | None = typer.Option(None, "--window", min=0.0, help=_WINDOW_HELP),
) -> None:
    """Connect to a device and print its services and characteristics."""
    try:
        service = _build_service()
        services = service.ping(address, window)
        typer.echo("Services:")
        for svc in services:
            typer.echo(f"{svc.uuid}:")
            for char in svc.characteristics:
                typer.echo(f"\t{char.uuid}: {', '.join(char.properties)}")
    except DeviceNotFoundError as exc:
        typer.echo(str(exc), err=True)
    except BleutilError as exc:
        _fail(exc)


@app.command("read")
def read(
    address: str,
    characteristic: str,
    window: float | None = typer.Option(None, "--window", min=0.0, help=_WINDOW_HELP),
    as_hex: bool = typer.Option(False, "--hex", help="Print the value as hex"),
) -> None:
    """Connect to a device and read the value of a characteristic."""
    try:
        service = _build_service()
        data = service.read(address, characteristic, window)
        typer.echo(data.hex() if as_hex else format_bytes(data))
    except DeviceNotFoundError as exc:
        typer.echo(str(exc), err=True)
    except BleutilError as exc:
        _fail(exc)


@app.command("write")
def write(
    address: str,
    characteristic: str | None = typer.Argument(None),
    interactive: bool = typer.Option(
        False,
        "--interactive",
        "-i",
        help="Exchange stdin lines with the configured UART characteristic pair",
    ),
    window: float | None = typer.Option(None, "--window", min=0.0, help=_WINDOW_HELP),
) -> None:
    """Write stdin to a characteristic without response.

    With --interactive, CHARACTERISTIC is omitted: each stdin line is written to
    the UART RX characteristic and the TX characteristic is read back, until
    stdin ends.
    """
    if interactive and characteristic is not None:
        raise typer.BadParameter(
            "takes no characteristic with --interactive; the UART pair comes from config",
            param_hint="CHARACTERISTIC",
        )
    if not interactive and characteristic is None:
        raise typer.BadParameter("is required unless --interactive is given", param_hint="CHARACTERISTIC")

    try:
        service = _build_service()
        if interactive:
            summary = service.write_interactive(address, typer.get_text_stream("stdin"), window)
            typer.echo(f"Exchanged {summary.lines} line(s)", err=True)
            return
        payload = typer.get_binary_stream("stdin").read()
        receipt = service.write(address, characteristic, payload, window)
        typer.echo(f"Wrote {receipt.length} bytes to {receipt.char_uuid}")
    except DeviceNotFoundError as exc:
        typer.echo(str(exc), err=True)
    except BleutilError as exc:
        _fail(exc)


@app.command("help")
def help_command() -> None:
    """Print usage text."""
    typer.echo(HELP_MSG, err=True)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
