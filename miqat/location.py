"""Location detection using IP geolocation and manual config."""

import json
import logging
import os

import requests

from miqat.prayer_calc import GeoCoordinate

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = {
    "city": "Mecca",
    "region": "Makkah",
    "country": "SA",
    "lat": 21.3891,
    "lon": 39.8579,
    "timezone": "Asia/Riyadh",
}

REQUIRED_KEYS = ("city", "region", "country", "lat", "lon", "timezone")

IPAPI_URL = "http://ip-api.com/json/"

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".miqat")
CONFIG_FILE = os.path.join(CONFIG_DIR, "location.json")


def get_location(timeout: int = 5) -> dict:
    """
    Detect current location via IP geolocation.

    Returns a dict with: city, region, country, lat, lon, timezone.
    Falls back to DEFAULT_LOCATION on failure.
    """
    try:
        resp = requests.get(
            IPAPI_URL,
            params={"fields": "city,regionName,country,lat,lon,timezone,status,message"},
            timeout=timeout,
        )
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("IP geolocation failed, using default location: %s", exc)
        return dict(DEFAULT_LOCATION)

    if data.get("status") != "success":
        logger.warning("IP geolocation refused: %s", data.get("message", "unknown"))
        return dict(DEFAULT_LOCATION)

    return {
        "city": data.get("city", DEFAULT_LOCATION["city"]),
        "region": data.get("regionName", DEFAULT_LOCATION["region"]),
        "country": data.get("country", DEFAULT_LOCATION["country"]),
        "lat": float(data.get("lat", DEFAULT_LOCATION["lat"])),
        "lon": float(data.get("lon", DEFAULT_LOCATION["lon"])),
        "timezone": data.get("timezone", DEFAULT_LOCATION["timezone"]),
    }


def save_manual_location(location: dict) -> None:
    """Save a manually-set location to the config file."""
    os.makedirs(CONFIG_DIR, exist_ok=True)
    with open(CONFIG_FILE, "w", encoding="utf-8") as f:
        json.dump(location, f, indent=2)
    logger.info("saved manual location to %s", CONFIG_FILE)


def load_manual_location() -> dict | None:
    """Load a previously saved manual location, or return None."""
    if not os.path.isfile(CONFIG_FILE):
        return None
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable location file %s: %s", CONFIG_FILE, exc)
        return None
    if isinstance(data, dict) and all(k in data for k in REQUIRED_KEYS):
        return data
    logger.warning("ignoring incomplete location file %s", CONFIG_FILE)
    return None


def clear_manual_location() -> None:
    """Remove the saved manual location config."""
    if os.path.isfile(CONFIG_FILE):
        os.remove(CONFIG_FILE)


def resolve_location() -> dict:
    """Saved manual location if there is one, otherwise IP geolocation."""
    return load_manual_location() or get_location()


def to_coordinate(location: dict) -> GeoCoordinate:
    return GeoCoordinate(float(location["lat"]), float(location["lon"]))
