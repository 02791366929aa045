"""A rate-limited reverse geocoding client."""

from __future__ import annotations

import json
import threading
import time
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Callable

BASE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
DAILY_CAP = 24 * 3600 / 100000


class GeocodeError(Exception):
    """The geocoding service answered with a failure status."""


@dataclass(frozen=True)
class LatLng:
    lat: float = 0.0
    lng: float = 0.0

    @classmethod
    def from_dict(cls, data: dict | None) -> "LatLng":
        data = data or {}
        return cls(float(data.get("lat", 0.0)), float(data.get("lng", 0.0)))


@dataclass(frozen=True)
class AddressComponent:
    long_name: str = ""
    short_name: str = ""
    types: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Geometry:
    location: LatLng = LatLng()
    location_type: str = ""
    northeast: LatLng = LatLng()
    southwest: LatLng = LatLng()


@dataclass(frozen=True)
class Result:
    formatted_address: str = ""
    place_id: str = ""
    types: list[str] = field(default_factory=list)
    address_components: list[AddressComponent] = field(default_factory=list)
    geometry: Geometry = Geometry()
    compound_code: str = ""
    global_code: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Result":
        geometry = data.get("geometry") or {}
        viewport = geometry.get("viewport") or {}
        plus = data.get("plus_code") or {}
        return cls(
            formatted_address=data.get("formatted_address", ""),
            place_id=data.get("place_id", ""),
            types=list(data.get("types") or []),
            address_components=[
                AddressComponent(
                    c.get("long_name", ""), c.get("short_name", ""), list(c.get("types") or [])
                )
                for c in data.get("address_components") or []
            ],
            geometry=Geometry(
                location=LatLng.from_dict(geometry.get("location")),
                location_type=geometry.get("location_type", ""),
                northeast=LatLng.from_dict(viewport.get("northeast")),
                southwest=LatLng.from_dict(viewport.get("southwest")),
            ),
            compound_code=plus.get("compound_code", ""),
            global_code=plus.get("global_code", ""),
        )

    def __str__(self) -> str:
        return self.formatted_address


def parse_response(payload: dict) -> list[Result]:
    """Results of an ``OK`` answer, none for ``ZERO_RESULTS``, else GeocodeError."""
    status = payload.get("status", "")
    if status == "OK":
        return [Result.from_dict(r) for r in payload.get("results") or []]
    if status == "ZERO_RESULTS":
        return []
    raise GeocodeError(f"status: {json.dumps(status)}")


class MapsClient:
    """Sends at most one request per ``tick`` seconds, with the API key added."""

    def __init__(
        self,
        tick: float = DAILY_CAP,
        key: str = "",
        opener: Callable[[str], Any] | None = None,
    ) -> None:
        self.tick = tick
        self.key = key
        self._opener = opener if opener is not None else urllib.request.urlopen
        self._lock = threading.Lock()
        self._next = time.monotonic() + tick
        self._closed = False

    def _wait(self) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("client closed")
            delay = self._next - time.monotonic()
            if delay > 0:
                time.sleep(delay)
            self._next = max(self._next, time.monotonic()) + self.tick

    def _url(self, lat: float, lng: float) -> str:
        query = urllib.parse.urlencode(
            sorted({"latlng": f"{float(lat)!r},{float(lng)!r}", "key": self.key}.items())
        )
        return f"{BASE_URL}?{query}"

    def reverse_geocode(self, lat: float, lng: float) -> list[Result]:
        """Addresses found at the given coordinates."""
        self._wait()
        response = self._opener(self._url(lat, lng))
        try:
            payload = json.load(response)
        finally:
            close = getattr(response, "close", None)
            if close is not None:
                close()
        return parse_response(payload)

    def close(self) -> None:
        with self._lock:
            self._closed = True

    def __enter__(self) -> "MapsClient":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()