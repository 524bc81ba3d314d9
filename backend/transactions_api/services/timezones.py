from __future__ import annotations

import logging
from datetime import datetime
from functools import cached_property
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timezonefinder import TimezoneFinder

from transactions_api.errors import ZoneResolutionError


logger = logging.getLogger(__name__)

ETC_GMT_PREFIX = "Etc/GMT"
_SIGN_PLACEHOLDER = "TEMP"


def normalize_zone_id(zone_id: str) -> str:
    """
    Map a stored zone id to the id used for conversion.

    `Etc/GMT±N` zones follow the POSIX sign convention (Etc/GMT+5 is five hours
    behind UTC), so their signs are swapped: Etc/GMT+5 -> Etc/GMT-5 and back.
    Every other id is returned unchanged.
    """
    if zone_id.startswith(ETC_GMT_PREFIX):
        return (
            zone_id.replace("+", _SIGN_PLACEHOLDER)
            .replace("-", "+")
            .replace(_SIGN_PLACEHOLDER, "-")
        )
    return zone_id


def resolve_zone(zone_id: str | None) -> ZoneInfo:
    """Return the ZoneInfo for an IANA id, or raise ZoneResolutionError."""
    if zone_id is None or not zone_id.strip():
        raise ZoneResolutionError("Time zone identifier must not be empty.")
    try:
        return ZoneInfo(zone_id.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        # ValueError: malformed keys such as absolute paths.
        # OSError: tzdata directory names such as "America".
        raise ZoneResolutionError(f"Unknown time zone: {zone_id!r}") from exc


def to_zone(timestamp: datetime, source: ZoneInfo, target: ZoneInfo) -> datetime:
    """Re-express a naive wall-clock time in `source` as naive wall-clock time in `target`."""
    # fold=0: ambiguous and non-existent local times take zoneinfo's default reading.
    return timestamp.replace(tzinfo=source).astimezone(target).replace(tzinfo=None)


def convert_local_time(timestamp: datetime, source_zone: str, target_zone: str) -> datetime:
    """Convert a naive timestamp from `source_zone` (already normalized) to `target_zone`."""
    return to_zone(timestamp, resolve_zone(source_zone), resolve_zone(target_zone))


class TimezoneLookup(Protocol):
    def resolve(self, latitude: float, longitude: float) -> str:
        ...


class GeoTimezoneLookup:
    """Coordinates -> IANA zone id, backed by timezonefinder."""

    @cached_property
    def _finder(self) -> TimezoneFinder:
        # Loading the polygon data is slow; do it on first use only.
        return TimezoneFinder()

    def resolve(self, latitude: float, longitude: float) -> str:
        zone_id = self._finder.timezone_at(lat=latitude, lng=longitude)
        if not zone_id:
            raise ZoneResolutionError(f"No time zone found for coordinates ({latitude}, {longitude}).")
        logger.debug(f"Resolved ({latitude}, {longitude}) -> {zone_id}")
        return zone_id
