# Project: mapbox-geocoder
# Owner: GreenUnicorn
"""
test_cli.py — Tests for the mapbox-geocode command line.

requests.get is mocked; the config file lives in tmp_path.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from mapbox_geocoder.cli import main


CONFIG_TOML = """
[mapbox]
access_token = "pk.cli-token"

[log]
path = "{log_path}"
"""

FEATURES = {
    "features": [
        {"geometry": {"type": "Point", "coordinates": [-0.1278, 51.5074]}, "place_name": "London, England, United Kingdom"},
        {"geometry": {"type": "Point", "coordinates": [-81.2497, 42.9837]}, "place_name": "London, Ontario, Canada"},
    ]
}


@pytest.fixture()
def config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TOML.format(log_path=(tmp_path / "geocoder.log").as_posix()))
    return path


def _make_response(status_code: int = 200, payload: dict | None = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.iter_content.return_value = iter([json.dumps(payload or {}).encode()])
    return response


@patch("mapbox_geocoder.geocoder.requests.get")
def test_forward_prints_each_result(mock_get, config_file, capsys):
    mock_get.return_value = _make_response(payload=FEATURES)

    main(["--config", str(config_file), "forward", "London"])

    out = capsys.readouterr().out
    assert "London, England, United Kingdom  (51.5074, -0.1278)" in out
    assert "London, Ontario, Canada" in out
    assert "pk.cli-token" in mock_get.call_args[0][0]


@patch("mapbox_geocoder.geocoder.requests.get")
def test_forward_passes_proximity(mock_get, config_file):
    mock_get.return_value = _make_response(payload=FEATURES)

    main(["--config", str(config_file), "forward", "London", "--proximity", "-81.2,42.9"])

    assert mock_get.call_args[0][0].endswith("&proximity=-81.2,42.9")


@patch("mapbox_geocoder.geocoder.requests.get")
def test_reverse_uses_lon_lat_in_url(mock_get, config_file, capsys):
    mock_get.return_value = _make_response(payload={"features": []})

    main(["--config", str(config_file), "reverse", "51.5074", "-0.1278"])

    assert "/-0.1278,51.5074.json" in mock_get.call_args[0][0]
    assert "No results." in capsys.readouterr().out


@patch("mapbox_geocoder.geocoder.requests.get")
def test_json_flag_prints_serialized_placemarks(mock_get, config_file, capsys):
    mock_get.return_value = _make_response(payload=FEATURES)

    main(["--config", str(config_file), "--json", "forward", "London"])

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0])["feature"]["place_name"] == "London, England, United Kingdom"


@patch("mapbox_geocoder.geocoder.requests.get")
def test_http_error_exits_non_zero(mock_get, config_file, capsys):
    mock_get.return_value = _make_response(status_code=401)

    with pytest.raises(SystemExit) as exc_info:
        main(["--config", str(config_file), "forward", "London"])

    assert exc_info.value.code == 1
    assert "Received HTTP status code 401" in capsys.readouterr().out


@patch("mapbox_geocoder.geocoder.requests.get")
def test_connection_error_exits_non_zero(mock_get, config_file):
    mock_get.side_effect = requests.ConnectionError("refused")

    with pytest.raises(SystemExit) as exc_info:
        main(["--config", str(config_file), "reverse", "0", "0"])

    assert exc_info.value.code == 1


def test_missing_config_exits_non_zero(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--config", str(tmp_path / "missing.toml"), "forward", "London"])

    assert exc_info.value.code == 1
    assert "Config file not found" in capsys.readouterr().out


def test_bad_proximity_is_usage_error(config_file):
    with pytest.raises(SystemExit) as exc_info:
        main(["--config", str(config_file), "forward", "London", "--proximity", "nonsense"])

    assert exc_info.value.code == 2


@patch("mapbox_geocoder.geocoder.requests.get")
def test_result_without_coordinates_is_printed(mock_get, config_file, capsys):
    payload = {"features": [{"geometry": {"type": "Point", "coordinates": []}, "place_name": "Somewhere"}]}
    mock_get.return_value = _make_response(payload=payload)

    main(["--config", str(config_file), "forward", "Somewhere"])

    assert "Somewhere  (no coordinates)" in capsys.readouterr().out
