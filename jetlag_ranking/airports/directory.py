"""
Airport geography lookup.

The engine resolves coordinates and timezones through an AirportDirectory.
The built-in table covers major long-haul hubs; callers with a real
enrichment layer pass their own records.
"""

from collections.abc import Iterable, Mapping

from ..types import AirportLocation

# code: (name, latitude, longitude, IANA timezone)
MAJOR_AIRPORTS: dict[str, tuple[str, float, float, str]] = {
    # North America
    "ATL": ("Hartsfield-Jackson Atlanta", 33.6407, -84.4277, "America/New_York"),
    "BOS": ("Boston Logan", 42.3656, -71.0096, "America/New_York"),
    "DEN": ("Denver", 39.8561, -104.6737, "America/Denver"),
    "DFW": ("Dallas/Fort Worth", 32.8998, -97.0403, "America/Chicago"),
    "EWR": ("Newark Liberty", 40.6895, -74.1745, "America/New_York"),
    "HNL": ("Honolulu", 21.3187, -157.9225, "Pacific/Honolulu"),
    "JFK": ("New York JFK", 40.6413, -73.7781, "America/New_York"),
    "LAX": ("Los Angeles", 33.9416, -118.4085, "America/Los_Angeles"),
    "MEX": ("Mexico City", 19.4361, -99.0719, "America/Mexico_City"),
    "MIA": ("Miami", 25.7959, -80.2870, "America/New_York"),
    "ORD": ("Chicago O'Hare", 41.9742, -87.9073, "America/Chicago"),
    "SEA": ("Seattle-Tacoma", 47.4502, -122.3088, "America/Los_Angeles"),
    "SFO": ("San Francisco", 37.6213, -122.3790, "America/Los_Angeles"),
    "YVR": ("Vancouver", 49.1967, -123.1815, "America/Vancouver"),
    "YYZ": ("Toronto Pearson", 43.6777, -79.6248, "America/Toronto"),
    # South America
    "GRU": ("Sao Paulo Guarulhos", -23.4356, -46.4731, "America/Sao_Paulo"),
    "SCL": ("Santiago", -33.3930, -70.7858, "America/Santiago"),
    # Europe
    "AMS": ("Amsterdam Schiphol", 52.3105, 4.7683, "Europe/Amsterdam"),
    "CDG": ("Paris Charles de Gaulle", 49.0097, 2.5479, "Europe/Paris"),
    "CPH": ("Copenhagen", 55.6180, 12.6508, "Europe/Copenhagen"),
    "FCO": ("Rome Fiumicino", 41.8003, 12.2389, "Europe/Rome"),
    "FRA": ("Frankfurt", 50.0379, 8.5622, "Europe/Berlin"),
    "HEL": ("Helsinki", 60.3172, 24.9633, "Europe/Helsinki"),
    "IST": ("Istanbul", 41.2753, 28.7519, "Europe/Istanbul"),
    "KEF": ("Reykjavik Keflavik", 63.9850, -22.6056, "Atlantic/Reykjavik"),
    "LHR": ("London Heathrow", 51.4700, -0.4543, "Europe/London"),
    "MAD": ("Madrid Barajas", 40.4983, -3.5676, "Europe/Madrid"),
    "MUC": ("Munich", 48.3537, 11.7750, "Europe/Berlin"),
    "ZRH": ("Zurich", 47.4582, 8.5555, "Europe/Zurich"),
    # Middle East / Africa
    "AUH": ("Abu Dhabi", 24.4330, 54.6511, "Asia/Dubai"),
    "DOH": ("Doha Hamad", 25.2731, 51.6081, "Asia/Qatar"),
    "DXB": ("Dubai", 25.2532, 55.3657, "Asia/Dubai"),
    "JNB": ("Johannesburg O.R. Tambo", -26.1367, 28.2411, "Africa/Johannesburg"),
    "NBO": ("Nairobi Jomo Kenyatta", -1.3192, 36.9278, "Africa/Nairobi"),
    # Asia
    "BKK": ("Bangkok Suvarnabhumi", 13.6900, 100.7501, "Asia/Bangkok"),
    "BOM": ("Mumbai", 19.0896, 72.8656, "Asia/Kolkata"),
    "DEL": ("Delhi", 28.5562, 77.1000, "Asia/Kolkata"),
    "HKG": ("Hong Kong", 22.3080, 113.9185, "Asia/Hong_Kong"),
    "HND": ("Tokyo Haneda", 35.5494, 139.7798, "Asia/Tokyo"),
    "ICN": ("Seoul Incheon", 37.4602, 126.4407, "Asia/Seoul"),
    "NRT": ("Tokyo Narita", 35.7720, 140.3929, "Asia/Tokyo"),
    "PEK": ("Beijing Capital", 40.0799, 116.6031, "Asia/Shanghai"),
    "PVG": ("Shanghai Pudong", 31.1443, 121.8083, "Asia/Shanghai"),
    "SIN": ("Singapore Changi", 1.3644, 103.9915, "Asia/Singapore"),
    # Oceania
    "AKL": ("Auckland", -37.0082, 174.7850, "Pacific/Auckland"),
    "MEL": ("Melbourne", -37.6690, 144.8410, "Australia/Melbourne"),
    "SYD": ("Sydney Kingsford Smith", -33.9399, 151.1753, "Australia/Sydney"),
}


class AirportDirectory:
    """Code to AirportLocation lookup. Unknown codes return None."""

    def __init__(self, locations: Iterable[AirportLocation] | None = None):
        self._locations: dict[str, AirportLocation] = {}
        for location in locations or ():
            self._locations[location.code.upper()] = location

    @classmethod
    def default(cls) -> "AirportDirectory":
        return cls(
            AirportLocation(code, name, lat, lon, tz)
            for code, (name, lat, lon, tz) in MAJOR_AIRPORTS.items()
        )

    @classmethod
    def from_records(cls, records: Mapping[str, Mapping]) -> "AirportDirectory":
        """Build from {"JFK": {"latitude": ..., "longitude": ..., "timezone": ...}}."""
        return cls(
            AirportLocation(
                code=code.upper(),
                name=record.get("name", ""),
                latitude=record.get("latitude"),
                longitude=record.get("longitude"),
                timezone=record.get("timezone"),
            )
            for code, record in records.items()
        )

    def merged(self, other: "AirportDirectory") -> "AirportDirectory":
        """New directory where other's entries override this one's."""
        merged = AirportDirectory()
        merged._locations = {**self._locations, **other._locations}
        return merged

    def get(self, code: str | None) -> AirportLocation | None:
        if not code:
            return None
        return self._locations.get(code.upper())

    def __contains__(self, code: str) -> bool:
        return code.upper() in self._locations

    def __len__(self) -> int:
        return len(self._locations)
