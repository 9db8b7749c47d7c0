"""
Enumerated types shared by the models, schemas and client.

These are part of the wire contract. Each enum maps to one named Postgres
ENUM type; changing a member set needs an explicit data migration for rows
already stored.
"""
from enum import Enum

from sqlalchemy import Enum as SAEnum


class SiteType(str, Enum):
    GREENHOUSE = "Greenhouse"
    STORAGE = "Storage"
    TRANSPORT = "Transport"
    PRODUCTION_FACILITY = "Production Facility"


class ProgramStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ProgramRole(str, Enum):
    """Role of a user within one pilot program."""

    ADMIN = "Admin"
    EDIT = "Edit"
    RESPOND = "Respond"
    READ_ONLY = "ReadOnly"


# Roles allowed to change site data
SITE_EDITOR_ROLES = (ProgramRole.ADMIN, ProgramRole.EDIT)


class InteriorWorkingSurfaceType(str, Enum):
    STAINLESS_STEEL = "Stainless Steel"
    UNFINISHED_CONCRETE = "Unfinished Concrete"
    WOOD = "Wood"
    PLASTIC = "Plastic"
    GRANITE = "Granite"
    OTHER_NON_ABSORBATIVE = "Other Non-Absorbative"


# Porous surfaces that earn one extra bag
ABSORBENT_SURFACES = frozenset({
    InteriorWorkingSurfaceType.WOOD,
    InteriorWorkingSurfaceType.UNFINISHED_CONCRETE,
})


class MicrobialRiskZone(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class VentilationStrategy(str, Enum):
    """Site ventilation strategy; also the airflow classification on submissions."""

    CROSS_VENTILATION = "Cross-Ventilation"
    POSITIVE_PRESSURE = "Positive Pressure"
    NEGATIVE_PRESSURE = "Negative Pressure"
    NEUTRAL_SEALED = "Neutral Sealed"


class PrimaryFunction(str, Enum):
    GROWING = "Growing"
    DRYING = "Drying"
    PACKAGING = "Packaging"
    STORAGE = "Storage"
    RESEARCH = "Research"
    RETAIL = "Retail"


class ConstructionMaterial(str, Enum):
    GLASS = "Glass"
    POLYCARBONATE = "Polycarbonate"
    METAL = "Metal"
    CONCRETE = "Concrete"
    WOOD = "Wood"


class InsulationType(str, Enum):
    NONE = "None"
    BASIC = "Basic"
    MODERATE = "Moderate"
    HIGH = "High"


class HVACSystemType(str, Enum):
    CENTRALIZED = "Centralized"
    DISTRIBUTED = "Distributed"
    EVAPORATIVE_COOLING = "Evaporative Cooling"
    NONE = "None"


class IrrigationSystemType(str, Enum):
    DRIP = "Drip"
    SPRINKLER = "Sprinkler"
    HYDROPONIC = "Hydroponic"
    MANUAL = "Manual"


class LightingSystem(str, Enum):
    NATURAL_LIGHT_ONLY = "Natural Light Only"
    LED = "LED"
    HPS = "HPS"
    FLUORESCENT = "Fluorescent"


class VentPlacement(str, Enum):
    CEILING_CENTER = "Ceiling-Center"
    CEILING_PERIMETER = "Ceiling-Perimeter"
    UPPER_WALLS = "Upper-Walls"
    LOWER_WALLS = "Lower-Walls"
    FLOOR_LEVEL = "Floor-Level"


class OdorDistance(str, Enum):
    FT_5_10 = "5-10ft"
    FT_10_25 = "10-25ft"
    FT_25_50 = "25-50ft"
    FT_50_100 = "50-100ft"
    FT_OVER_100 = ">100ft"


class Weather(str, Enum):
    CLEAR = "Clear"
    CLOUDY = "Cloudy"
    RAIN = "Rain"


class SessionStatus(str, Enum):
    OPENED = "Opened"
    WORKING = "Working"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    EXPIRED = "Expired"
    ESCALATED = "Escalated"
    SHARED = "Shared"
    EXPIRED_COMPLETE = "Expired-Complete"
    EXPIRED_INCOMPLETE = "Expired-Incomplete"


# Sessions in these states never come back and are hidden from active lists
TERMINAL_SESSION_STATUSES = frozenset({
    SessionStatus.CANCELLED,
    SessionStatus.EXPIRED,
    SessionStatus.EXPIRED_COMPLETE,
    SessionStatus.EXPIRED_INCOMPLETE,
})


class HistoryEventType(str, Enum):
    PROGRAM_CREATION = "ProgramCreation"
    PROGRAM_UPDATE = "ProgramUpdate"
    SITE_CREATION = "SiteCreation"
    SITE_UPDATE = "SiteUpdate"
    SITE_DELETION = "SiteDeletion"
    SUBMISSION_CREATION = "SubmissionCreation"
    SUBMISSION_UPDATE = "SubmissionUpdate"


def pg_enum(enum_cls: type[Enum], name: str) -> SAEnum:
    """Named Postgres ENUM storing member values (e.g. 'Production Facility')."""
    return SAEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


# Postgres type names, one per enum
PG_ENUM_NAMES: dict[type[Enum], str] = {
    SiteType: "site_type_enum",
    ProgramStatus: "program_status_enum",
    ProgramRole: "user_role_enum",
    InteriorWorkingSurfaceType: "interior_working_surface_type_enum",
    MicrobialRiskZone: "microbial_risk_zone_enum",
    VentilationStrategy: "ventilation_strategy_enum",
    PrimaryFunction: "primary_function_enum",
    ConstructionMaterial: "construction_material_enum",
    InsulationType: "insulation_type_enum",
    HVACSystemType: "hvac_system_type_enum",
    IrrigationSystemType: "irrigation_system_type_enum",
    LightingSystem: "lighting_system_enum",
    VentPlacement: "vent_placement_enum",
    OdorDistance: "odor_distance_enum",
    Weather: "weather_enum",
    SessionStatus: "session_status_enum",
    HistoryEventType: "history_event_type_enum",
}


def column_enum(enum_cls: type[Enum]) -> SAEnum:
    """Column type for ``enum_cls`` using its registered Postgres type name."""
    return pg_enum(enum_cls, PG_ENUM_NAMES[enum_cls])
