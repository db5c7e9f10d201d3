import logging
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .logic import (
    BACKLIGHT_CLASS_DIR,
    BacklightError,
    InvalidArgument,
    compute_target,
    locate_device,
    parse_adjustment,
    read_brightness,
    read_max_brightness,
    validate_value,
    write_brightness,
)

logger = logging.getLogger(__name__)


def check_value(ctx, param, value):
    if value is None:
        return None
    try:
        return validate_value(value)
    except InvalidArgument as e:
        raise click.BadParameter(str(e)) from e


def stats_lines(class_dir: Path) -> tuple[list[str], bool]:
    """
    Reads max and current brightness independently.
    Returns the two output lines and whether both reads succeeded.
    """
    try:
        device = locate_device(class_dir)
        locate_error = None
    except BacklightError as e:
        device = None
        locate_error = e

    lines = []
    ok = True
    for label, what, reader in (
        ("Max", "max brightness", read_max_brightness),
        ("Current", "brightness", read_brightness),
    ):
        if device is None:
            error = locate_error
        else:
            try:
                lines.append(f"{label}: {reader(device)}")
                continue
            except BacklightError as e:
                error = e
        ok = False
        lines.append(f"{label}: Failed to get {what}: {error}")
    return lines, ok


def set_value(value: str, class_dir: Path) -> int:
    """
    Applies a VALUE argument to the backlight and returns the value written.
    Failures are reported with the step that failed.
    """
    spec = parse_adjustment(value)
    step = "locate backlight device"
    try:
        device = locate_device(class_dir)
        step = "read brightness"
        current = read_brightness(device)
        step = "read max brightness"
        max_brightness = read_max_brightness(device)
        target = compute_target(current, max_brightness, spec)
        logger.debug("%s %d: %d -> %d (max %d)", spec.kind.value, spec.amount, current, target, max_brightness)
        step = "write brightness"
        write_brightness(target, device, max_brightness)
    except BacklightError as e:
        raise click.ClickException(f"Failed to {step}: {e}") from e
    return target


@click.command(context_settings={"ignore_unknown_options": True, "help_option_names": ["-h", "--help"]})
@click.argument("value", type=str, required=False, callback=check_value)
@click.option("-s", "--stats", is_flag=True,
              help="Print backlight information. If this is used no value will be set, even if provided.")
@click.option("--class-dir", type=click.Path(file_okay=False, path_type=Path), default=str(BACKLIGHT_CLASS_DIR),
              envvar="BACKLIGHT_CLASS_DIR", show_default=True, help="Directory holding the backlight devices.")
@click.option("-v", "--verbose", is_flag=True, help="Log device selection, reads and writes to stderr.")
@click.version_option(__version__, "--version", prog_name="backlight")
@click.pass_context
def main(ctx: click.Context, value: Optional[str], stats: bool, class_dir: Path, verbose: bool):
    """
    A simple util for controlling the backlight brightness on your device.

    VALUE sets or adjusts the brightness. A leading + or - adjusts relative to
    the current brightness, a trailing % counts in percent of the maximum.

    Examples: +50 | -10 | 200 | 50% | +10%
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if stats:
        lines, ok = stats_lines(class_dir)
        for line in lines:
            click.echo(line)
        ctx.exit(0 if ok else 1)

    if not value:
        click.echo(ctx.get_help())
        return

    set_value(value, class_dir)
