"""Parsers for filed-route strings such as ``"51.2N/3.4W 52.0N/1.0W"``."""

from __future__ import annotations

import re
from typing import List

from flight4d.trajectory.domain_types import Point2D

_COORD_RE = re.compile(r"^(-?\d+(?:\.\d+)?)([NSEW])$", re.IGNORECASE)


class RouteParseError(ValueError):
    """Raised when a route token does not match ``<number><hemisphere>``."""

    def __init__(self, token: str, message: str | None = None):
        self.token = token
        super().__init__(message or f"Bad coordinate token: {token!r}")


def parse_coord_token(token: str) -> float:
    """Convert ``"51.2N"`` / ``"3.4W"`` to signed decimal degrees."""
    match = _COORD_RE.match((token or "").strip())
    if not match:
        raise RouteParseError(token)
    value = abs(float(match.group(1)))
    hemisphere = match.group(2).upper()
    return -value if hemisphere in ("S", "W") else value


def parse_lat_lon_pair(pair: str) -> Point2D:
    parts = pair.split("/")
    if len(parts) != 2:
        raise RouteParseError(pair, f"Bad route fix {pair!r}: expected LAT/LON")
    lat_token, lon_token = parts
    if lat_token.strip()[-1:].upper() not in ("N", "S"):
        raise RouteParseError(lat_token, f"Bad latitude token {lat_token!r} in fix {pair!r}")
    if lon_token.strip()[-1:].upper() not in ("E", "W"):
        raise RouteParseError(lon_token, f"Bad longitude token {lon_token!r} in fix {pair!r}")
    return Point2D(lat=parse_coord_token(lat_token), lon=parse_coord_token(lon_token))


def parse_route(route: str | None) -> List[Point2D]:
    """Parse a whitespace-separated list of fixes; blank routes yield no fixes."""
    text = (route or "").strip()
    if not text:
        return []
    return [parse_lat_lon_pair(pair) for pair in text.split()]


__all__ = ["RouteParseError", "parse_coord_token", "parse_lat_lon_pair", "parse_route"]
