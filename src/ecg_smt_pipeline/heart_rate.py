"""Heart rate from a peak count and the recording length."""

import math

from .config import default_config


def round_half_up(x: float) -> int:
    """Round by truncating ``x + 0.5`` (2.5 -> 3, -2.5 -> -2)."""
    return int(math.trunc(x + 0.5))


def estimate_heart_rate(
    peak_count: int,
    series_length: int,
    sampling_hz: int = default_config.SAMPLING_RATE,
) -> int:
    """
    Convert a number of detected peaks into beats per minute.

    ``bpm = round_half_up(peak_count * 60 * sampling_hz / series_length)``

    Negative inputs are not rejected; they follow the same formula and
    rounding rule (e.g. -30.0 bpm rounds to -29).

    Raises
    ------
    ZeroDivisionError
        If the series is empty.
    """
    if series_length == 0:
        raise ZeroDivisionError("Cannot estimate heart rate from an empty series")

    return round_half_up(peak_count * 60 * sampling_hz / series_length)
