"""Built-in station list, TAF overrides and airport display names."""

from airwx.config.schema import StationConfig

DEFAULT_STATIONS: list[StationConfig] = [
    StationConfig(id="KMJX", name="Ocean County Airport"),
    StationConfig(id="KWRI", name="McGuire"),
    StationConfig(id="KACY", name="Atlantic City"),
    StationConfig(id="KSMQ", name="Somerset"),
    StationConfig(id="KPHL", name="Philadelphia"),
]

# Airports without a TAF of their own borrow a nearby station's forecast.
DEFAULT_TAF_OVERRIDES: dict[str, str] = {
    "KMJX": "KWRI",
    "KSMQ": "KTTN",
}

# Used when the METAR record carries no station name.
AIRPORT_NAMES: dict[str, str] = {
    "KMJX": "Ocean County Airport",
    "KWRI": "McGuire",
    "KACY": "Atlantic City",
    "KBLM": "Belmar / Monmouth",
    "KNEL": "Lakehurst NAS",
    "KSMQ": "Somerset",
    "KPHL": "Philadelphia International Airport",
    "KTTN": "Trenton",
    "KEWR": "Newark Liberty International Airport",
    "KLGA": "LaGuardia Airport",
    "KJFK": "John F. Kennedy International Airport",
    "KMMU": "Morristown",
    "KN07": "Lincoln Park",
    "KCDW": "Essex County",
    "K12N": "Andover",
    "KN40": "South Jersey Regional",
    "KILG": "Wilmington",
    "KRDG": "Reading",
    "KABE": "Allentown",
    "KMDT": "Harrisburg",
    "KIPT": "Williamsport",
    "KAVP": "Wilkes-Barre/Scranton",
    "KERI": "Erie",
    "KBWI": "Baltimore/Washington International",
    "KDCA": "Ronald Reagan Washington National",
    "KIAD": "Washington Dulles International",
}
