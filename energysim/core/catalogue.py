"""Static reference data: Swedish weather stations, construction periods,
building types and the locked design parameters of each simulated archetype.

Station ids match the TMYx weather files held by the simulation service.
"""

CONSTRUCTION_PERIODS = [
    {"id": "before-1961", "label": "Before 1961"},
    {"id": "1961-1975", "label": "1961-1975"},
    {"id": "1976-1985", "label": "1976-1985"},
    {"id": "1986-1995", "label": "1986-1995"},
    {"id": "1996-2005", "label": "1996-2005"},
]
PERIOD_IDS = [p["id"] for p in CONSTRUCTION_PERIODS]

# Listed in display order; batch tables are sorted by this order
BUILDING_TYPES = [
    {"id": "single-family-house", "label": "Single Family House", "available": True},
    {"id": "mid-rise-apartment", "label": "Mid-Rise Apartment", "available": True},
    {"id": "office", "label": "Office", "available": False},
    {"id": "school", "label": "School", "available": False},
    {"id": "retail", "label": "Retail", "available": False},
    {"id": "hotel", "label": "Hotel", "available": False},
    {"id": "warehouse", "label": "Warehouse", "available": False},
    {"id": "hospital", "label": "Hospital", "available": False},
]
AVAILABLE_BUILDING_TYPES = [b["id"] for b in BUILDING_TYPES if b["available"]]
BUILDING_TYPE_ORDER = {b["id"]: i + 1 for i, b in enumerate(BUILDING_TYPES)}

SIMULATION_TYPES = ("pre-configured", "real-time", "batch")

WINDOW_U_VALUES = {"single": 2.8, "double": 2.3, "triple": 1.8}
VENTILATION_TYPES = ("self-propelled", "mechanical-exhaust", "mechanical-exhaust-hr")
WWR_OPTIONS = (15, 20, 30, 40)

# (min, max) for the editable envelope parameters of a real-time run
CUSTOM_PARAMETER_BOUNDS = {
    "wall_u": (0.1, 1.0),
    "attic_u": (0.1, 0.5),
    "ground_u": (0.1, 0.5),
    "ach": (0.0, 1.0),
}


def _archetype(wall, attic, ground, window, ach, floor_area, floors, window_area):
    return {
        "wall_u_value": wall,
        "attic_u_value": attic,
        "ground_slab_u_value": ground,
        "window_u_value": window,
        "infiltration_ach": ach,
        "floor_area": floor_area,
        "number_of_floors": floors,
        "window_area": window_area,
    }


# U-values in W/m²K include film resistances
ARCHETYPE_PARAMETERS = {
    "single-family-house": {
        "before-1961": _archetype(0.60, 0.29, 0.28, 2.34, 0.15, 125, 2, 28),
        "1961-1975": _archetype(0.31, 0.21, 0.32, 2.30, 0.15, 125, 2, 28),
        "1976-1985": _archetype(0.21, 0.15, 0.27, 2.01, 0.15, 125, 2, 28),
        "1986-1995": _archetype(0.17, 0.12, 0.24, 1.94, 0.15, 125, 2, 28),
        "1996-2005": _archetype(0.20, 0.12, 0.18, 1.87, 0.08, 125, 2, 28),
    },
    "mid-rise-apartment": {
        "before-1961": _archetype(0.58, 0.36, 0.36, 2.22, 0.05, 3135, 4, 307),
        "1961-1975": _archetype(0.50, 0.28, 0.32, 2.22, 0.05, 3135, 4, 307),
        "1976-1985": _archetype(0.41, 0.20, 0.28, 2.22, 0.05, 3135, 4, 307),
        "1986-1995": _archetype(0.22, 0.15, 0.26, 1.80, 0.05, 3135, 4, 307),
        "1996-2005": _archetype(0.20, 0.13, 0.22, 1.97, 0.04, 3135, 4, 307),
    },
}

SWEDEN_COUNTIES = [
    {"code": "BD", "name": "Norrbotten", "stations": [
        {"id": "kiruna", "name": "Kiruna"},
        {"id": "gallivare", "name": "Gällivare"},
        {"id": "lulea", "name": "Luleå"},
        {"id": "boden", "name": "Boden"},
        {"id": "haparanda", "name": "Haparanda"},
        {"id": "pajala", "name": "Pajala"},
        {"id": "jokkmokk", "name": "Jokkmokk"},
        {"id": "arvidsjaur", "name": "Arvidsjaur"},
    ]},
    {"code": "AC", "name": "Västerbotten", "stations": [
        {"id": "umea", "name": "Umeå"},
        {"id": "skelleftea", "name": "Skellefteå"},
        {"id": "lycksele", "name": "Lycksele"},
        {"id": "vilhelmina", "name": "Vilhelmina"},
        {"id": "storuman", "name": "Storuman"},
    ]},
    {"code": "Z", "name": "Jämtland", "stations": [
        {"id": "ostersund", "name": "Östersund"},
        {"id": "are", "name": "Åre"},
        {"id": "sveg", "name": "Sveg"},
    ]},
    {"code": "Y", "name": "Västernorrland", "stations": [
        {"id": "sundsvall", "name": "Sundsvall"},
        {"id": "harnosand", "name": "Härnösand"},
        {"id": "ornskoldsvik", "name": "Örnsköldsvik"},
    ]},
    {"code": "X", "name": "Gävleborg", "stations": [
        {"id": "gavle", "name": "Gävle"},
        {"id": "soderhamn", "name": "Söderhamn"},
    ]},
    {"code": "W", "name": "Dalarna", "stations": [
        {"id": "borlange", "name": "Borlänge"},
        {"id": "mora", "name": "Mora"},
        {"id": "malung", "name": "Malung"},
        {"id": "idre", "name": "Idre"},
    ]},
    {"code": "S", "name": "Värmland", "stations": [
        {"id": "karlstad", "name": "Karlstad"},
        {"id": "arvika", "name": "Arvika"},
        {"id": "torsby", "name": "Torsby"},
    ]},
    {"code": "T", "name": "Örebro", "stations": [
        {"id": "orebro", "name": "Örebro"},
    ]},
    {"code": "U", "name": "Västmanland", "stations": [
        {"id": "vasteras", "name": "Västerås"},
    ]},
    {"code": "C", "name": "Uppsala", "stations": [
        {"id": "uppsala", "name": "Uppsala"},
    ]},
    {"code": "AB", "name": "Stockholm", "stations": [
        {"id": "stockholm", "name": "Stockholm"},
        {"id": "stockholm-arlanda", "name": "Stockholm-Arlanda"},
        {"id": "stockholm-bromma", "name": "Stockholm-Bromma"},
    ]},
    {"code": "D", "name": "Södermanland", "stations": [
        {"id": "eskilstuna", "name": "Eskilstuna"},
        {"id": "nykoping", "name": "Nyköping"},
    ]},
    {"code": "E", "name": "Östergötland", "stations": [
        {"id": "norrkoping", "name": "Norrköping"},
        {"id": "linkoping", "name": "Linköping"},
    ]},
    {"code": "F", "name": "Jönköping", "stations": [
        {"id": "jonkoping", "name": "Jönköping"},
    ]},
    {"code": "G", "name": "Kronoberg", "stations": [
        {"id": "vaxjo", "name": "Växjö"},
        {"id": "ljungby", "name": "Ljungby"},
    ]},
    {"code": "H", "name": "Kalmar", "stations": [
        {"id": "kalmar", "name": "Kalmar"},
    ]},
    {"code": "I", "name": "Gotland", "stations": [
        {"id": "visby", "name": "Visby"},
    ]},
    {"code": "K", "name": "Blekinge", "stations": [
        {"id": "karlskrona", "name": "Karlskrona"},
        {"id": "ronneby", "name": "Ronneby"},
    ]},
    {"code": "M", "name": "Skåne", "stations": [
        {"id": "malmo", "name": "Malmö"},
        {"id": "lund", "name": "Lund"},
        {"id": "helsingborg", "name": "Helsingborg"},
        {"id": "kristianstad", "name": "Kristianstad"},
        {"id": "angelholm", "name": "Ängelholm"},
    ]},
    {"code": "N", "name": "Halland", "stations": [
        {"id": "halmstad", "name": "Halmstad"},
    ]},
    {"code": "O", "name": "Västra Götaland", "stations": [
        {"id": "goteborg", "name": "Göteborg"},
        {"id": "goteborg-landvetter", "name": "Göteborg-Landvetter"},
        {"id": "trollhattan", "name": "Trollhättan"},
        {"id": "skovde", "name": "Skövde"},
        {"id": "satenas", "name": "Såtenäs"},
    ]},
]


def all_station_ids() -> list[str]:
    return [s["id"] for county in SWEDEN_COUNTIES for s in county["stations"]]


def station_name(station_id: str) -> str:
    """Display name for a station id; unknown ids are returned unchanged."""
    for county in SWEDEN_COUNTIES:
        for station in county["stations"]:
            if station["id"] == station_id:
                return station["name"]
    return station_id


def county_for_station(station_id: str) -> str:
    for county in SWEDEN_COUNTIES:
        if any(s["id"] == station_id for s in county["stations"]):
            return county["name"]
    return ""


def is_known_station(station_id: str) -> bool:
    return station_id in all_station_ids()


def building_type_label(building_type: str) -> str:
    for b in BUILDING_TYPES:
        if b["id"] == building_type:
            return b["label"]
    return building_type


def archetype_parameters(building_type: str, period_id: str) -> dict:
    """Locked design parameters shown for a pre-configured or batch archetype.

    Raises KeyError for a building type or period without a simulated archetype.
    """
    return dict(ARCHETYPE_PARAMETERS[building_type][period_id])


def default_custom_parameters(building_type: str) -> dict:
    """Geometry defaults applied when the building type of a real-time run changes."""
    if building_type == "mid-rise-apartment":
        return {"heated_floor_area": 3135, "number_of_floors": 4, "wwr": 20}
    return {"heated_floor_area": 125, "number_of_floors": 2, "wwr": 15}
