"""Gazetteer of South Dakota localities - Pure data and lookups.

Used to match alerts that carry no geometry: the user is placed at the
nearest known locality, and that locality's counties are searched for in
the alert's area description.
"""

from dataclasses import dataclass

from weather_alerts.core.geo import calculate_distance


@dataclass(frozen=True)
class Locality:
    """A named place with its enclosing counties."""
    name: str
    lat: float
    lon: float
    counties: tuple[str, ...]


def _loc(name: str, lat: float, lon: float, *counties: str) -> Locality:
    return Locality(name=name, lat=lat, lon=lon, counties=counties)


SOUTH_DAKOTA_LOCALITIES: tuple[Locality, ...] = (
    _loc("Sioux Falls", 43.5446, -96.7311, "Minnehaha", "Lincoln"),
    _loc("Rapid City", 44.0805, -103.2310, "Pennington"),
    _loc("Aberdeen", 45.4647, -98.4864, "Brown"),
    _loc("Brookings", 44.3114, -96.7984, "Brookings"),
    _loc("Watertown", 44.9016, -97.1151, "Codington"),
    _loc("Pierre", 44.3683, -100.3510, "Hughes"),
    _loc("Yankton", 42.8711, -97.3973, "Yankton"),
    _loc("Huron", 44.3633, -98.2142, "Beadle"),
    _loc("Vermillion", 42.7794, -96.9292, "Clay"),
    _loc("Mitchell", 43.7097, -98.0298, "Davison"),
    _loc("Spearfish", 44.4908, -103.8594, "Lawrence"),
    _loc("Sturgis", 44.4097, -103.5091, "Meade"),
    _loc("Deadwood", 44.3767, -103.7296, "Lawrence"),
    _loc("Lead", 44.3512, -103.7652, "Lawrence"),
    _loc("Belle Fourche", 44.6714, -103.8521, "Butte"),
    _loc("Hot Springs", 43.4316, -103.4741, "Fall River"),
    _loc("Custer", 43.7694, -103.6019, "Custer"),
    _loc("Keystone", 43.8961, -103.4263, "Pennington"),
    _loc("Hill City", 43.9325, -103.5749, "Pennington"),
    _loc("Madison", 44.0061, -97.1139, "Lake"),
    _loc("Brandon", 43.5944, -96.5717, "Minnehaha"),
    _loc("Harrisburg", 43.4316, -96.6989, "Lincoln"),
    _loc("Tea", 43.8419, -96.8359, "Lincoln"),
    _loc("Dell Rapids", 43.8261, -96.7062, "Minnehaha"),
    _loc("Hartford", 43.6230, -96.9428, "Minnehaha"),
    _loc("Crooks", 43.6647, -96.8106, "Minnehaha"),
    _loc("Baltic", 43.7614, -96.7392, "Minnehaha"),
    _loc("Colton", 43.7875, -96.9267, "Minnehaha"),
    _loc("Valley Springs", 43.5833, -96.4653, "Minnehaha"),
    _loc("Lennox", 43.3547, -96.8928, "Lincoln"),
    _loc("Canton", 43.3008, -96.5928, "Lincoln"),
    _loc("Worthing", 43.3297, -96.7678, "Lincoln"),
    _loc("Parker", 43.3975, -97.1367, "Turner"),
    _loc("Marion", 43.4225, -97.2592, "Turner"),
    _loc("Freeman", 43.3525, -97.4392, "Hutchinson"),
    _loc("Menno", 43.2383, -97.5792, "Hutchinson"),
    _loc("Scotland", 43.1497, -97.7167, "Bon Homme"),
    _loc("Tyndall", 42.9942, -97.8628, "Bon Homme"),
    _loc("Springfield", 42.8542, -97.8967, "Bon Homme"),
    _loc("Wagner", 43.0797, -98.2939, "Charles Mix"),
    _loc("Lake Andes", 43.1567, -98.5406, "Charles Mix"),
    _loc("Platte", 43.3867, -98.8439, "Charles Mix"),
    _loc("Geddes", 43.2567, -98.6967, "Charles Mix"),
    _loc("Avon", 43.0017, -98.0594, "Bon Homme"),
    _loc("Tripp", 43.2258, -99.8647, "Tripp"),
    _loc("Winner", 43.3767, -99.8567, "Tripp"),
    _loc("Colome", 43.2583, -99.7147, "Tripp"),
    _loc("Gregory", 43.2325, -99.4306, "Gregory"),
    _loc("Burke", 43.1825, -99.2928, "Gregory"),
    _loc("Bonesteel", 43.0758, -98.9417, "Gregory"),
    _loc("Fairfax", 43.0342, -98.8939, "Gregory"),
    _loc("Dallas", 43.2358, -99.5178, "Gregory"),
    _loc("Herrick", 43.1158, -99.1897, "Gregory"),
    _loc("Armour", 43.3189, -98.3467, "Douglas"),
    _loc("Corsica", 43.4275, -98.4067, "Douglas"),
    _loc("Delmont", 43.2567, -98.1597, "Douglas"),
    _loc("Harrison", 43.4317, -98.5267, "Douglas"),
    _loc("Dimock", 43.4775, -97.9867, "Hutchinson"),
    _loc("Kaylor", 43.1942, -97.8367, "Hutchinson"),
    _loc("Milltown", 43.4258, -97.7939, "Hutchinson"),
    _loc("Olivet", 43.2417, -97.6739, "Hutchinson"),
    _loc("Parkston", 43.3989, -97.9839, "Hutchinson"),
    _loc("Bridgewater", 43.5508, -97.4997, "McCook"),
    _loc("Canistota", 43.6008, -97.2997, "McCook"),
    _loc("Montrose", 43.7008, -97.1839, "McCook"),
    _loc("Salem", 43.7242, -97.3839, "McCook"),
    _loc("Spencer", 43.7275, -97.5997, "McCook"),
    _loc("Alpena", 44.1817, -98.3667, "Jerauld"),
    _loc("Wessington Springs", 44.0792, -98.5697, "Jerauld"),
    _loc("Woonsocket", 44.0539, -98.2767, "Sanborn"),
    _loc("Artesian", 44.0008, -97.9167, "Sanborn"),
    _loc("Letcher", 43.8967, -98.1339, "Sanborn"),
    _loc("Howard", 44.0108, -97.5167, "Miner"),
    _loc("Carthage", 44.1692, -97.7167, "Miner"),
    _loc("Fedora", 44.0089, -97.7839, "Miner"),
    _loc("Canova", 43.8825, -97.5167, "Miner"),
    _loc("Ethan", 43.5458, -98.0008, "Davison"),
    _loc("Mount Vernon", 43.7097, -98.2597, "Davison"),
    _loc("Loomis", 43.7875, -98.1339, "Hanson"),
    _loc("Alexandria", 43.6539, -97.7839, "Hanson"),
    _loc("Emery", 43.6025, -97.6167, "Hanson"),
    _loc("Fulton", 43.7275, -97.8167, "Hanson"),
    _loc("Hanson", 43.6742, -97.7839, "Hanson"),
    _loc("Monroe", 43.4817, -97.2167, "Turner"),
    _loc("Centerville", 43.1175, -96.9617, "Turner"),
    _loc("Chancellor", 43.3725, -96.9839, "Turner"),
    _loc("Davis", 43.2567, -96.9339, "Turner"),
    _loc("Hurley", 43.2758, -97.0997, "Turner"),
    _loc("Irene", 43.0839, -97.2667, "Turner"),
    _loc("Viborg", 43.1739, -97.0839, "Turner"),
    _loc("Wakonda", 43.0089, -97.0997, "Turner"),
    _loc("Alcester", 43.0217, -96.6317, "Union"),
    _loc("Beresford", 43.0817, -96.7839, "Union"),
    _loc("Elk Point", 42.6839, -96.6839, "Union"),
    _loc("Jefferson", 42.6058, -96.5667, "Union"),
    _loc("North Sioux City", 42.5275, -96.4839, "Union"),
    _loc("Volin", 42.9567, -97.1839, "Yankton"),
    _loc("Gayville", 42.8875, -97.5497, "Yankton"),
    _loc("Lesterville", 42.8567, -97.6339, "Yankton"),
    _loc("Utica", 42.9817, -97.7497, "Yankton"),
)


def find_nearest_locality(
    lat: float,
    lon: float,
    localities: tuple[Locality, ...] = SOUTH_DAKOTA_LOCALITIES,
) -> tuple[Locality, float] | None:
    """Find the gazetteer entry closest to a point.

    Pure function.

    Args:
        lat: Point latitude
        lon: Point longitude
        localities: Gazetteer to search

    Returns:
        (locality, distance_km), or None for an empty gazetteer
    """
    nearest: tuple[Locality, float] | None = None

    for locality in localities:
        distance = calculate_distance(lat, lon, locality.lat, locality.lon)
        if nearest is None or distance < nearest[1]:
            nearest = (locality, distance)

    return nearest


def area_mentions_any(area_description: str, names: tuple[str, ...]) -> bool:
    """Check if any name appears in an area description (case-insensitive).

    Pure function.
    """
    area_lower = area_description.lower()
    return any(name.lower() in area_lower for name in names)
