"""Shared helpers for field reconciliation.

Internal module, used by credential and presentation.
"""

import math
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any


def as_array(value: Any) -> list:
    """Wrap a scalar in a list; lists and tuples are returned as a new list."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def unique(*values: Any) -> list:
    """Ordered union of one or more scalars/lists, dropping ``None``.

    Entries keep the position of their first occurrence.
    """
    result: list = []
    for value in values:
        for entry in as_array(value):
            if entry is not None and entry not in result:
                result.append(entry)
    return result


def deep_copy(value: Any) -> Any:
    """Structurally clone JSON-like credential data.

    Mappings become dicts, lists and tuples become lists. Scalars and
    date/datetime values are immutable and returned as-is.
    """
    if value is None or isinstance(value, (str, int, float, bool, date)):
        return value
    if isinstance(value, Mapping):
        return {key: deep_copy(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [deep_copy(item) for item in value]
    raise TypeError(f"Unable to copy value of type {type(value).__name__}")


def clean_none(obj: Mapping) -> dict:
    """Return a copy of ``obj`` without ``None``-valued keys."""
    return {key: value for key, value in obj.items() if value is not None}


def seconds_to_iso(seconds: int | float) -> str:
    """Convert JWT NumericDate seconds to an ISO-8601 UTC string with milliseconds.

    >>> seconds_to_iso(1600000000)
    '2020-09-13T12:26:40.000Z'
    """
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_to_seconds(value: Any) -> int | None:
    """Convert an ISO-8601 date(-time) to whole seconds since the epoch.

    Naive values are read as UTC. Returns ``None`` if ``value`` cannot be
    parsed, so callers can leave the original field in place.
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            moment = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return math.floor(moment.timestamp())


def _claim_to_iso(seconds: Any) -> str | None:
    try:
        return seconds_to_iso(seconds)
    except (OverflowError, ValueError, OSError, TypeError):
        return None


def fill_dates_from_claims(obj: dict) -> None:
    """Set ``issuanceDate``/``expirationDate`` from ``nbf``|``iat``/``exp``.

    Consumed NumericDate claims are removed from ``obj``. Existing dates win.
    Claims that cannot be represented as a date (past year 9999, non-numeric)
    are left in place.
    """
    if not obj.get("issuanceDate"):
        nbf = obj.get("nbf")
        iat = obj.get("iat")
        if nbf or iat:
            issued = _claim_to_iso(nbf or iat)
            if issued is not None:
                obj["issuanceDate"] = issued
                del obj["nbf" if nbf else "iat"]

    if not obj.get("expirationDate") and obj.get("exp"):
        expires = _claim_to_iso(obj["exp"])
        if expires is not None:
            obj["expirationDate"] = expires
            del obj["exp"]


def fill_claims_from_dates(original: Mapping, obj: dict) -> None:
    """Set ``nbf``/``exp`` on ``obj`` from the dates of ``original``.

    A claim key present in ``original`` (even with value ``None``) blocks the
    conversion. Unparseable dates are left in place.
    """
    for date_key, claim in (("issuanceDate", "nbf"), ("expirationDate", "exp")):
        if not original.get(date_key) or claim in original:
            continue
        seconds = iso_to_seconds(original[date_key])
        if seconds is not None:
            obj[claim] = seconds
            obj.pop(date_key, None)
