"""Human-readable distance and duration strings for route summaries."""
import math


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_distance(meters: float) -> str:
    """
    950 -> "950 m", 1500 -> "1.5 km".

    Below one kilometre the value is rounded to whole metres, otherwise shown
    in kilometres with one decimal.
    """
    if meters < 1000:
        return f"{_round_half_up(meters)} m"
    return f"{meters / 1000:.1f} km"


def format_duration(seconds: float) -> str:
    """45 -> "1 min", 5400 -> "1h 30m"."""
    minutes = _round_half_up(seconds / 60)
    if minutes < 60:
        return f"{minutes} min"
    hours, rest = divmod(minutes, 60)
    return f"{hours}h {rest}m"
