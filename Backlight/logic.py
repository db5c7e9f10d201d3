import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

BACKLIGHT_CLASS_DIR = Path("/sys/class/backlight")

PREFERRED_DEVICES = ["amdgpu_bl1", "amdgpu_bl0", "nvidia_wmi_ec_backlight", "intel_backlight"]

VALUE_PATTERN = re.compile(r"[+-]?[0-9]+%?")
_UNSIGNED_PATTERN = re.compile(r"[0-9]+")

VALUE_EXAMPLES = "+50 | -10 | 200 | 50% | +10%"

PERMISSION_HINT = (
    "You don't seem to have permission to write to the backlight brightness file. "
    "Add a udev rule that grants the `video` group write access to it and add yourself to that group."
)


class BacklightError(Exception):
    pass


class DeviceNotFound(BacklightError):
    pass


class BacklightIOError(BacklightError):
    pass


class BacklightParseError(BacklightError, ValueError):
    pass


class InvalidArgument(BacklightError, ValueError):
    pass


class InvalidValue(BacklightError, ValueError):
    pass


class AdjustmentKind(enum.Enum):
    ABSOLUTE_RAW = "absolute-raw"
    ABSOLUTE_PERCENT = "absolute-percent"
    RELATIVE_RAW = "relative-raw"
    RELATIVE_PERCENT = "relative-percent"


@dataclass(frozen=True)
class AdjustmentSpec:
    """
    A brightness request, tagged once at parse time.

    `amount` is a raw value or a percentage of the maximum for absolute kinds,
    and a signed delta (raw or percent) for relative kinds.
    """
    kind: AdjustmentKind
    amount: int

    @property
    def is_relative(self) -> bool:
        return self.kind in (AdjustmentKind.RELATIVE_RAW, AdjustmentKind.RELATIVE_PERCENT)

    @property
    def is_percentage(self) -> bool:
        return self.kind in (AdjustmentKind.ABSOLUTE_PERCENT, AdjustmentKind.RELATIVE_PERCENT)


@dataclass(frozen=True)
class BacklightDevice:
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def brightness_file(self) -> Path:
        return self.path / "brightness"

    @property
    def max_brightness_file(self) -> Path:
        return self.path / "max_brightness"


def _has_control_files(path: Path) -> bool:
    return (path / "brightness").is_file() and (path / "max_brightness").is_file()


def get_brightness_paths(class_dir: Path = BACKLIGHT_CLASS_DIR) -> Iterator[Path]:
    """
    Yields every backlight directory under class_dir that has both control files.
    Well-known devices come first in PREFERRED_DEVICES order, the rest follow sorted by name.
    """
    class_dir = Path(class_dir)
    if not class_dir.is_dir():
        return
    preferred = [class_dir / name for name in PREFERRED_DEVICES]
    try:
        others = sorted(p for p in class_dir.iterdir() if p.name not in PREFERRED_DEVICES)
    except OSError as e:
        raise BacklightIOError(f"Cannot list {class_dir}: {e}") from e
    for path in preferred + others:
        if _has_control_files(path):
            yield path


def locate_device(class_dir: Path = BACKLIGHT_CLASS_DIR) -> BacklightDevice:
    """
    Returns the backlight device to operate on.

    Only one device is expected. On hosts with several, the first path from
    get_brightness_paths() wins.
    """
    for path in get_brightness_paths(class_dir):
        logger.debug("Using backlight device %s", path)
        return BacklightDevice(path)
    raise DeviceNotFound(f"No backlight device found in {class_dir}")


def read_value(path: Path) -> int:
    """
    Reads an unsigned base-10 integer from a control file.
    """
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise BacklightIOError(str(e)) from e
    except UnicodeDecodeError as e:
        raise BacklightParseError(f"{path} does not hold a non-negative integer: {e}") from e
    text = text.strip()
    if not _UNSIGNED_PATTERN.fullmatch(text):
        raise BacklightParseError(f"{path} does not hold a non-negative integer: {text!r}")
    value = int(text)
    logger.debug("Read %d from %s", value, path)
    return value


def read_max_brightness(device: BacklightDevice) -> int:
    return read_value(device.max_brightness_file)


def read_brightness(device: BacklightDevice) -> int:
    return read_value(device.brightness_file)


def write_brightness(value: int, device: BacklightDevice, max_brightness: Optional[int] = None):
    """
    Writes an already clamped value to the brightness file.
    The value is checked against the device range but never clamped here.
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidValue(f"Brightness must be an integer, got {value!r}")
    if max_brightness is None:
        max_brightness = read_max_brightness(device)
    if value < 0 or value > max_brightness:
        raise InvalidValue(f"Brightness {value} is outside the range 0..{max_brightness}")

    try:
        device.brightness_file.write_text(str(value))
    except PermissionError as e:
        raise BacklightIOError(f"{e}. {PERMISSION_HINT}") from e
    except OSError as e:
        raise BacklightIOError(str(e)) from e
    logger.debug("Wrote %d to %s", value, device.brightness_file)


def percent_of(maximum: int, percent: int) -> int:
    """
    Returns percent % of maximum, rounded half away from zero.
    Integer-exact, so percent_of(255, 50) == 128 and percent_of(5, -10) == -1.
    """
    quotient, remainder = divmod(maximum * abs(percent), 100)
    if remainder * 2 >= 100:
        quotient += 1
    return quotient if percent >= 0 else -quotient


def clamp(value: int, maximum: int) -> int:
    return max(0, min(value, maximum))


def compute_target(current: int, maximum: int, spec: AdjustmentSpec) -> int:
    """
    Computes the brightness to write for the given request.
    The result is always within 0..maximum; out-of-range requests saturate.
    """
    if spec.kind is AdjustmentKind.ABSOLUTE_RAW:
        target = spec.amount
    elif spec.kind is AdjustmentKind.ABSOLUTE_PERCENT:
        target = percent_of(maximum, spec.amount)
    elif spec.kind is AdjustmentKind.RELATIVE_RAW:
        target = current + spec.amount
    else:
        target = current + percent_of(maximum, spec.amount)
    return clamp(target, maximum)


def validate_value(value: str) -> str:
    """
    Checks a VALUE argument against the accepted grammar.
    The empty string passes through; callers decide what it means.
    """
    if value == "" or VALUE_PATTERN.fullmatch(value):
        return value
    raise InvalidArgument(f"'{value}' does not match the accepted forms: {VALUE_EXAMPLES}")


def parse_adjustment(value: str) -> AdjustmentSpec:
    """
    Turns a VALUE argument into an AdjustmentSpec.
    A leading sign means relative, a trailing % means percentage.
    """
    validate_value(value)
    if not value:
        raise InvalidArgument(f"An empty value is not a brightness; use one of: {VALUE_EXAMPLES}")

    is_percentage = value.endswith("%")
    amount = int(value.rstrip("%"))
    if value[0] in "+-":
        kind = AdjustmentKind.RELATIVE_PERCENT if is_percentage else AdjustmentKind.RELATIVE_RAW
    else:
        kind = AdjustmentKind.ABSOLUTE_PERCENT if is_percentage else AdjustmentKind.ABSOLUTE_RAW
    return AdjustmentSpec(kind, amount)


def adjust_brightness(spec: AdjustmentSpec, device: Optional[BacklightDevice] = None) -> int:
    """
    High-level function that applies the request to the device and returns the value written.

    Library entry point for callers that only need the outcome. The CLI runs the
    same steps itself so that its diagnostics can name the step that failed.
    """
    if device is None:
        device = locate_device()
    current = read_brightness(device)
    max_brightness = read_max_brightness(device)
    target = compute_target(current, max_brightness, spec)
    logger.debug("%s %d: %d -> %d (max %d)", spec.kind.value, spec.amount, current, target, max_brightness)
    write_brightness(target, device, max_brightness)
    return target


def adjust_brightness_absolute(value: int, percentage: bool, device: Optional[BacklightDevice] = None) -> int:
    """
    Sets the brightness to value, raw or as a percentage of the maximum.
    """
    if value < 0:
        raise InvalidArgument(f"Absolute brightness must not be negative, got {value}")
    kind = AdjustmentKind.ABSOLUTE_PERCENT if percentage else AdjustmentKind.ABSOLUTE_RAW
    return adjust_brightness(AdjustmentSpec(kind, value), device)


def adjust_brightness_relative(value: int, percentage: bool, device: Optional[BacklightDevice] = None) -> int:
    """
    Changes the brightness by a signed delta, raw or as a percentage of the maximum.
    """
    kind = AdjustmentKind.RELATIVE_PERCENT if percentage else AdjustmentKind.RELATIVE_RAW
    return adjust_brightness(AdjustmentSpec(kind, value), device)
