# Project: mapbox-geocoder
# Owner: GreenUnicorn
"""
geocoder.py — Forward and reverse geocoding against the Mapbox geocoding API.

A Geocoder runs at most one request at a time. Calls return immediately;
the result arrives later through a completion handler called with
(placemarks, error) exactly once:

    def on_done(placemarks, error):
        if error is not None:
            print(error)
        else:
            for placemark in placemarks:
                print(placemark.name)

    geocoder = Geocoder("pk.my-token")
    geocoder.geocode_address_string("1600 Pennsylvania Ave", on_done)

The handler runs on the geocoder's worker thread, not the caller's.

Two behaviours callers must plan for:
- A request made while another is in flight is ignored, and its handler is
  never called.
- cancel_geocode() does not call the pending handler.

API docs: https://docs.mapbox.com/api/search/geocoding/
"""

import json
import threading
from collections.abc import Callable
from pathlib import Path
from urllib.parse import quote

import requests

from mapbox_geocoder.config import DEFAULT_BASE_URL, DEFAULT_DATASET, DEFAULT_TIMEOUT
from mapbox_geocoder.errors import (
    GeocoderConnectionError,
    GeocoderError,
    GeocoderHTTPError,
    GeocoderParseError,
)
from mapbox_geocoder.placemark import Coordinate, Placemark
from mapbox_geocoder.utils import log_error


CHUNK_SIZE = 8192

CompletionHandler = Callable[[list[Placemark] | None, GeocoderError | None], None]


# ---------------------------------------------------------------------------
# URL construction
# ---------------------------------------------------------------------------

def encode_path_segment(text: str) -> str:
    """Percent-encode text for use as a single URL path segment.

    Reserved characters ('/', '&', '?', '#', ';', space, ...) are escaped;
    unreserved characters (letters, digits, '-', '.', '_', '~') are kept.
    """
    return quote(text, safe="")


def _lon_lat(coordinate: Coordinate) -> str:
    return f"{coordinate.longitude},{coordinate.latitude}"


def _geocode_url(base_url: str, dataset: str, segment: str, access_token: str) -> str:
    return (
        f"{base_url.rstrip('/')}/geocode/{dataset}/{segment}.json"
        f"?access_token={encode_path_segment(access_token)}"
    )


def reverse_geocode_url(
    coordinate: Coordinate,
    access_token: str,
    base_url: str = DEFAULT_BASE_URL,
    dataset: str = DEFAULT_DATASET,
) -> str:
    """Build the request URL for a coordinate → place lookup."""
    return _geocode_url(base_url, dataset, _lon_lat(coordinate), access_token)


def forward_geocode_url(
    address: str,
    access_token: str,
    proximity: Coordinate | None = None,
    base_url: str = DEFAULT_BASE_URL,
    dataset: str = DEFAULT_DATASET,
) -> str:
    """Build the request URL for a free-text → place lookup.

    Args:
        address: Free-text query, e.g. 'Brooklyn Bridge'.
        access_token: Mapbox access token.
        proximity: Optional coordinate used to bias result ranking.
        base_url: API root, without trailing slash.
        dataset: Geocoding dataset name.

    Returns:
        Full request URL with the query percent-encoded exactly once.
    """
    url = _geocode_url(base_url, dataset, encode_path_segment(address), access_token)
    if proximity is not None:
        url += f"&proximity={_lon_lat(proximity)}"
    return url


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class _Exchange:
    """State for one HTTP request/response cycle."""

    def __init__(self, url: str, handler: CompletionHandler):
        self.url = url
        self.handler = handler
        self.buffer: bytearray | None = None
        self.cancelled = False


class Geocoder:
    """Client for the Mapbox geocoding API, one request in flight at a time.

    Args:
        access_token: Mapbox access token sent with every request.
        base_url: API root. Defaults to the public v4 endpoint.
        dataset: Geocoding dataset name.
        timeout: Seconds handed to the HTTP transport for connect/read.
        log_path: If set, failures are appended to this log file.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
        dataset: str = DEFAULT_DATASET,
        timeout: float = DEFAULT_TIMEOUT,
        log_path: Path | None = None,
    ):
        self._access_token = access_token
        self._base_url = base_url
        self._dataset = dataset
        self._timeout = timeout
        self._log_path = log_path
        self._lock = threading.Lock()
        self._active: _Exchange | None = None

    @property
    def access_token(self) -> str:
        return self._access_token

    @property
    def geocoding(self) -> bool:
        """True while a request is in flight."""
        return self._active is not None

    # ── Public API ───────────────────────────────────────────────

    def reverse_geocode(self, coordinate: Coordinate, completion_handler: CompletionHandler) -> None:
        """Look up places at a coordinate. Ignored if a request is in flight."""
        url = reverse_geocode_url(
            coordinate, self._access_token, base_url=self._base_url, dataset=self._dataset,
        )
        self._start(url, completion_handler)

    def geocode_address_string(
        self,
        address: str,
        completion_handler: CompletionHandler,
        proximity: Coordinate | None = None,
    ) -> None:
        """Look up places matching free text. Ignored if a request is in flight.

        Args:
            address: Free-text query.
            completion_handler: Called once with (placemarks, None) or
                (None, error).
            proximity: Optional coordinate to bias results towards.
        """
        url = forward_geocode_url(
            address,
            self._access_token,
            proximity=proximity,
            base_url=self._base_url,
            dataset=self._dataset,
        )
        self._start(url, completion_handler)

    def cancel_geocode(self) -> None:
        """Abandon the in-flight request, if any. Its handler is not called."""
        with self._lock:
            exchange = self._active
            self._active = None
        if exchange is not None:
            exchange.cancelled = True

    # ── Exchange lifecycle ───────────────────────────────────────

    def _start(self, url: str, handler: CompletionHandler) -> None:
        with self._lock:
            if self._active is not None:
                return
            exchange = _Exchange(url, handler)
            self._active = exchange
        thread = threading.Thread(
            target=self._run, args=(exchange,), name="geocoder-exchange", daemon=True,
        )
        thread.start()

    def _run(self, exchange: _Exchange) -> None:
        try:
            self._exchange(exchange)
        except Exception as e:
            # Anything unexpected still ends the exchange. Errors raised after
            # delivery (e.g. from the caller's handler) are left to propagate.
            if not self._is_active(exchange):
                raise
            self._did_fail(exchange, e)

    def _is_active(self, exchange: _Exchange) -> bool:
        with self._lock:
            return self._active is exchange

    def _exchange(self, exchange: _Exchange) -> None:
        try:
            response = requests.get(exchange.url, stream=True, timeout=self._timeout)
        except requests.RequestException as e:
            self._did_fail(exchange, e)
            return

        try:
            if not self._did_receive_response(exchange, response):
                return
            try:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if exchange.cancelled:
                        return
                    self._did_receive_data(exchange, chunk)
            except requests.RequestException as e:
                self._did_fail(exchange, e)
                return
            self._did_finish_loading(exchange)
        finally:
            response.close()

    def _did_fail(self, exchange: _Exchange, error: Exception) -> None:
        failure = GeocoderConnectionError(error, url=exchange.url)
        failure.__cause__ = error
        self._complete(exchange, None, failure)

    def _did_receive_response(self, exchange: _Exchange, response: requests.Response) -> bool:
        """Return True if the body should be read, False if the exchange is over."""
        if exchange.cancelled:
            return False
        status_code = response.status_code
        if status_code != 200:
            self._complete(exchange, None, GeocoderHTTPError(status_code))
            return False
        exchange.buffer = bytearray()
        return True

    def _did_receive_data(self, exchange: _Exchange, chunk: bytes) -> None:
        exchange.buffer.extend(chunk)

    def _did_finish_loading(self, exchange: _Exchange) -> None:
        try:
            data = json.loads(bytes(exchange.buffer))
        except (ValueError, RecursionError):
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors;
            # deeply nested arrays exhaust the decoder's recursion limit
            self._complete(exchange, None, GeocoderParseError())
            return
        if not isinstance(data, dict):
            self._complete(exchange, None, GeocoderParseError())
            return

        features = data.get("features")
        if not isinstance(features, list):
            self._complete(exchange, [], None)
            return

        placemarks = []
        for feature in features:
            if not isinstance(feature, dict):
                continue
            placemark = Placemark.from_feature(feature)
            if placemark is not None:
                placemarks.append(placemark)
        self._complete(exchange, placemarks, None)

    def _complete(
        self,
        exchange: _Exchange,
        placemarks: list[Placemark] | None,
        error: GeocoderError | None,
    ) -> None:
        """Return to idle, then hand the outcome to the caller's handler."""
        with self._lock:
            if self._active is not exchange:
                return  # cancelled
            self._active = None

        if error is not None:
            print(f"[geocoder] Request failed: {error}")
            if self._log_path is not None:
                log_error(str(error), log_path=self._log_path)

        exchange.handler(placemarks, error)
