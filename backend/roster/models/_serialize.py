"""Serialization helpers shared by model ``to_dict`` methods."""


def iso(value):
    """ISO-8601 string for a date/datetime, ``None`` passthrough."""
    return value.isoformat() if value is not None else None
