import click
from eth_utils import to_checksum_address

from deployment.constants import ONE_WEEK

DURATION_UNITS = {"s": 1, "m": 60, "h": 60 * 60, "d": 24 * 60 * 60, "w": ONE_WEEK}


def parse_duration(value) -> int:
    """
    Returns a duration in seconds. Accepts whole numbers of seconds and strings
    with an optional unit suffix (e.g. '4w', '28d'). Raises ValueError otherwise.
    """
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a valid duration")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value!r} is not a whole number of seconds")
        return int(value)
    if not isinstance(value, str):
        raise ValueError(f"{value!r} is not a valid duration")

    text = value.strip().lower()
    multiplier = DURATION_UNITS.get(text[-1:])
    if multiplier is not None:
        text = text[:-1]
    else:
        multiplier = 1
    try:
        return int(text) * multiplier
    except ValueError:
        raise ValueError(f"{value!r} is not a valid duration")


class Duration(click.ParamType):
    """A number of seconds, optionally written with a unit suffix (e.g. '4w', '28d')."""

    name = "duration"

    def __init__(self, min_value: int = 0):
        self.min_value = min_value

    def convert(self, value, param, ctx):
        try:
            seconds = parse_duration(value)
        except ValueError:
            self.fail(f"{value} is not a valid duration", param, ctx)
        if seconds < self.min_value:
            self.fail(
                f"{value} is less than the minimum allowed value of {self.min_value} seconds",
                param,
                ctx,
            )
        return seconds


class ChecksumAddress(click.ParamType):
    name = "checksum_address"

    def convert(self, value, param, ctx):
        try:
            value = to_checksum_address(value=value)
        except ValueError:
            self.fail(f"{value} is not a valid ethereum address", param, ctx)
        else:
            return value
