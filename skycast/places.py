# ABOUTME: Static place registry used by the geocoder, plus country-name aliases.
# ABOUTME: Several entries may share a city name; each carries its own timezone.

from pydantic import BaseModel, ConfigDict

EXACT_TOLERANCE = 0.1
APPROXIMATE_TOLERANCE = 0.5


class Place(BaseModel):
    """One registry entry."""

    model_config = ConfigDict(frozen=True)

    name: str
    admin_region: str | None = None
    admin_code: str | None = None
    country_code: str | None = None
    country: str | None = None
    latitude: float
    longitude: float
    timezone: str
    tolerance: float = EXACT_TOLERANCE


PLACES: tuple[Place, ...] = (
    Place(name="London", admin_region="England", admin_code="ENG", country_code="GB", country="United Kingdom",
          latitude=51.5074, longitude=-0.1278, timezone="Europe/London"),
    Place(name="London", admin_region="Ontario", admin_code="ON", country_code="CA", country="Canada",
          latitude=42.9849, longitude=-81.2453, timezone="America/Toronto"),
    Place(name="London", admin_region="Kentucky", admin_code="KY", country_code="US", country="United States",
          latitude=37.1290, longitude=-84.0833, timezone="America/New_York"),
    Place(name="New York", admin_region="New York", admin_code="NY", country_code="US", country="United States",
          latitude=40.7128, longitude=-74.0060, timezone="America/New_York"),
    Place(name="Paris", admin_region="Île-de-France", admin_code="IDF", country_code="FR", country="France",
          latitude=48.8566, longitude=2.3522, timezone="Europe/Paris"),
    Place(name="Tokyo", admin_region="Tokyo", admin_code="13", country_code="JP", country="Japan",
          latitude=35.6895, longitude=139.6917, timezone="Asia/Tokyo"),
    Place(name="Berlin", admin_region="Berlin", admin_code="BE", country_code="DE", country="Germany",
          latitude=52.5200, longitude=13.4050, timezone="Europe/Berlin"),
    Place(name="Springfield", admin_region="Illinois", admin_code="IL", country_code="US", country="United States",
          latitude=39.7817, longitude=-89.6501, timezone="America/Chicago"),
    Place(name="Springfield", admin_region="Massachusetts", admin_code="MA", country_code="US",
          country="United States", latitude=42.1015, longitude=-72.5898, timezone="America/New_York"),
    Place(name="Springfield", admin_region="Missouri", admin_code="MO", country_code="US", country="United States",
          latitude=37.2090, longitude=-93.2923, timezone="America/Chicago"),
    Place(name="Sydney", admin_region="New South Wales", admin_code="NSW", country_code="AU", country="Australia",
          latitude=-33.8688, longitude=151.2093, timezone="Australia/Sydney"),
    Place(name="Sydney", admin_region="Nova Scotia", admin_code="NS", country_code="CA", country="Canada",
          latitude=46.1368, longitude=-60.1942, timezone="America/Halifax"),
    Place(name="Kathmandu", admin_region="Bagmati", country_code="NP", country="Nepal",
          latitude=27.7172, longitude=85.3240, timezone="Asia/Kathmandu"),
    Place(name="Honolulu", admin_region="Hawaii", admin_code="HI", country_code="US", country="United States",
          latitude=21.3069, longitude=-157.8583, timezone="Pacific/Honolulu"),
    Place(name="Reykjavik", admin_region="Capital Region", country_code="IS", country="Iceland",
          latitude=64.1466, longitude=-21.9426, timezone="Atlantic/Reykjavik", tolerance=APPROXIMATE_TOLERANCE),
    Place(name="Monaco", country_code="MC", country="Monaco",
          latitude=43.7384, longitude=7.4246, timezone="Europe/Monaco"),
)

COUNTRY_ALIASES = {
    "uk": "GB",
    "united kingdom": "GB",
    "great britain": "GB",
    "britain": "GB",
    "england": "GB",
    "usa": "US",
    "united states": "US",
    "united states of america": "US",
    "america": "US",
    "canada": "CA",
    "france": "FR",
    "japan": "JP",
    "germany": "DE",
    "australia": "AU",
    "nepal": "NP",
    "iceland": "IS",
    "monaco": "MC",
}
