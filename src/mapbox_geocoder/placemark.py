# Project: mapbox-geocoder
# Owner: GreenUnicorn
"""
placemark.py — Place records built from geocoding API features.

Each feature in the API's "features" array looks like:

    {
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
        "place_name": "Brooklyn, New York, United States",
        ...
    }

A Placemark only exists for features that pass _is_valid_feature(). All
fields are read straight from the stored feature when accessed.
"""

import copy
import json
from typing import NamedTuple


class Coordinate(NamedTuple):
    latitude: float
    longitude: float


def _is_valid_feature(feature) -> bool:
    """Return True if the feature has a Point geometry with coordinates and a place_name."""
    if not isinstance(feature, dict):
        return False
    geometry = feature.get("geometry")
    if not isinstance(geometry, dict):
        return False
    if geometry.get("type") != "Point":
        return False
    if not isinstance(geometry.get("coordinates"), list):
        return False
    return isinstance(feature.get("place_name"), str)


def _restore(feature: dict) -> "Placemark":
    # Used by pickle. Stored payloads were validated when first built.
    return Placemark(feature)


class Placemark:
    """An immutable view over one validated geocoding feature.

    Build instances with Placemark.from_feature(); the plain constructor
    trusts its input and is used for copies and deserialization.

    The structured address fields (country, postal_code, locality, ...) are
    not populated by this API's feature schema and always hold empty values.
    """

    __slots__ = ("_feature",)

    def __init__(self, feature: dict):
        object.__setattr__(self, "_feature", feature)

    @classmethod
    def from_feature(cls, feature: dict) -> "Placemark | None":
        """Wrap a feature dict, or return None if it fails validation.

        Args:
            feature: One element of the API response's "features" array.

        Returns:
            A Placemark, or None if geometry is not a Point with coordinates
            or place_name is missing.
        """
        if not _is_valid_feature(feature):
            return None
        return cls(copy.deepcopy(feature))

    @classmethod
    def from_json(cls, text: str) -> "Placemark":
        """Rebuild a Placemark from the output of to_json().

        The payload is trusted as previously validated and is not re-checked.
        """
        return cls(json.loads(text)["feature"])

    def to_json(self) -> str:
        """Serialize the raw feature payload as a JSON string."""
        return json.dumps({"feature": self._feature})

    def copy(self) -> "Placemark":
        return Placemark(self._feature)

    __copy__ = copy

    def __reduce__(self):
        return (_restore, (self._feature,))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other):
        if not isinstance(other, Placemark):
            return NotImplemented
        return self._comparison_key() == other._comparison_key()

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return f"Placemark(name={self.name!r}, coordinates={self._coordinates!r})"

    def _comparison_key(self) -> tuple:
        # Features with fewer than two coordinates have no location to compare.
        if len(self._coordinates) < 2:
            return (self.name, tuple(self._coordinates))
        return (self.name, self.location)

    # ── Derived fields ───────────────────────────────────────────

    @property
    def feature(self) -> dict:
        """A copy of the raw feature payload."""
        return copy.deepcopy(self._feature)

    @property
    def _coordinates(self) -> list:
        return self._feature["geometry"]["coordinates"]

    @property
    def location(self) -> Coordinate:
        """Latitude/longitude from the [lon, lat] coordinates pair."""
        coordinates = self._coordinates
        return Coordinate(
            latitude=float(coordinates[1]),
            longitude=float(coordinates[0]),
        )

    @property
    def name(self) -> str:
        return self._feature["place_name"]

    # ── Address components (not present in this payload schema) ──

    @property
    def address_dictionary(self) -> dict:
        return {}

    @property
    def iso_country_code(self) -> str:
        return ""

    @property
    def country(self) -> str:
        return ""

    @property
    def postal_code(self) -> str:
        return ""

    @property
    def administrative_area(self) -> str:
        return ""

    @property
    def sub_administrative_area(self) -> str:
        return ""

    @property
    def locality(self) -> str:
        return ""

    @property
    def sub_locality(self) -> str:
        return ""

    @property
    def thoroughfare(self) -> str:
        return ""

    @property
    def sub_thoroughfare(self) -> str:
        return ""

    @property
    def region(self) -> None:
        return None

    @property
    def inland_water(self) -> str:
        return ""

    @property
    def ocean(self) -> str:
        return ""

    @property
    def areas_of_interest(self) -> list:
        return []
