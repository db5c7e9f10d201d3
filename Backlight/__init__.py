__version__ = "0.1.0"

from .logic import (
    AdjustmentKind as AdjustmentKind,
)
from .logic import (
    AdjustmentSpec as AdjustmentSpec,
)
from .logic import (
    BacklightDevice as BacklightDevice,
)
from .logic import (
    BacklightError as BacklightError,
)
from .logic import (
    adjust_brightness as adjust_brightness,
)
from .logic import (
    adjust_brightness_absolute as adjust_brightness_absolute,
)
from .logic import (
    adjust_brightness_relative as adjust_brightness_relative,
)
from .logic import (
    compute_target as compute_target,
)
from .logic import (
    locate_device as locate_device,
)
from .logic import (
    read_brightness as read_brightness,
)
from .logic import (
    read_max_brightness as read_max_brightness,
)
from .logic import (
    write_brightness as write_brightness,
)

__all__ = [
    "AdjustmentKind",
    "AdjustmentSpec",
    "BacklightDevice",
    "BacklightError",
    "adjust_brightness",
    "adjust_brightness_absolute",
    "adjust_brightness_relative",
    "compute_target",
    "locate_device",
    "read_brightness",
    "read_max_brightness",
    "write_brightness",
]
