"""
Site model - a physical facility tracked under a pilot program.

Square/cubic footage and the recommended bag count are derived values;
see ``pilot_tracker.services.site_metrics``.
"""
import uuid
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import Boolean, CheckConstraint, Float, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from pilot_tracker.models.base import Base, TimestampMixin, UUIDMixin
from pilot_tracker.models.enums import (
    ConstructionMaterial,
    HVACSystemType,
    InsulationType,
    InteriorWorkingSurfaceType,
    IrrigationSystemType,
    LightingSystem,
    MicrobialRiskZone,
    PrimaryFunction,
    SiteType,
    VentilationStrategy,
    VentPlacement,
    column_enum,
)

if TYPE_CHECKING:
    from pilot_tracker.models.pilot_program import PilotProgram
    from pilot_tracker.models.submission import Submission

MIN_DEADZONES = 1
MAX_DEADZONES = 25
DEFAULT_DENSITY_SQFT_PER_BAG = 2000.0


class Site(Base, UUIDMixin, TimestampMixin):
    """
    Site model representing a facility with physical and environmental traits.

    ``quantity_deadzones`` is bounded to [1, 25] both by a CHECK constraint
    and by an attribute validator, so out-of-range values never reach a row.
    """

    __tablename__ = "sites"
    __table_args__ = (
        CheckConstraint(
            f"quantity_deadzones IS NULL OR "
            f"(quantity_deadzones >= {MIN_DEADZONES} AND quantity_deadzones <= {MAX_DEADZONES})",
            name="ck_sites_quantity_deadzones_range",
        ),
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    type: Mapped[SiteType] = mapped_column(
        column_enum(SiteType),
        nullable=False,
    )

    program_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("pilot_programs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    program: Mapped["PilotProgram"] = relationship(
        "PilotProgram",
        back_populates="sites",
    )

    # Defaults copied into new submissions / observations
    submission_defaults: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONB, nullable=True)
    petri_defaults: Mapped[Optional[list[Any]]] = mapped_column(JSONB, nullable=True)
    gasifier_defaults: Mapped[Optional[list[Any]]] = mapped_column(JSONB, nullable=True)

    # Physical attributes (feet)
    length: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    width: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    height: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    square_footage: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    cubic_footage: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    num_vents: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    vent_placements: Mapped[Optional[list[VentPlacement]]] = mapped_column(
        ARRAY(column_enum(VentPlacement)),
        nullable=True,
    )

    # Facility details
    primary_function: Mapped[Optional[PrimaryFunction]] = mapped_column(
        column_enum(PrimaryFunction), nullable=True
    )
    construction_material: Mapped[Optional[ConstructionMaterial]] = mapped_column(
        column_enum(ConstructionMaterial), nullable=True
    )
    insulation_type: Mapped[Optional[InsulationType]] = mapped_column(
        column_enum(InsulationType), nullable=True
    )

    # Environmental controls
    hvac_system_present: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    hvac_system_type: Mapped[Optional[HVACSystemType]] = mapped_column(
        column_enum(HVACSystemType), nullable=True
    )
    irrigation_system_type: Mapped[Optional[IrrigationSystemType]] = mapped_column(
        column_enum(IrrigationSystemType), nullable=True
    )
    lighting_system: Mapped[Optional[LightingSystem]] = mapped_column(
        column_enum(LightingSystem), nullable=True
    )

    # Gasifier density
    min_efficacious_gasifier_density_sqft_per_bag: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        default=DEFAULT_DENSITY_SQFT_PER_BAG,
    )
    recommended_placement_density_bags: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )
    has_dead_zones: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    num_regularly_opened_ports: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Environmental descriptors
    interior_working_surface_types: Mapped[Optional[list[InteriorWorkingSurfaceType]]] = mapped_column(
        ARRAY(column_enum(InteriorWorkingSurfaceType)),
        nullable=True,
    )
    microbial_risk_zone: Mapped[Optional[MicrobialRiskZone]] = mapped_column(
        column_enum(MicrobialRiskZone),
        nullable=True,
        default=MicrobialRiskZone.MEDIUM,
    )
    quantity_deadzones: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    ventilation_strategy: Mapped[Optional[VentilationStrategy]] = mapped_column(
        column_enum(VentilationStrategy), nullable=True
    )

    lastupdated_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    submissions: Mapped[list["Submission"]] = relationship(
        "Submission",
        back_populates="site",
        cascade="all, delete-orphan",
    )

    @validates("quantity_deadzones")
    def validate_quantity_deadzones(self, key: str, value: Optional[int]) -> Optional[int]:
        if value is not None and not MIN_DEADZONES <= value <= MAX_DEADZONES:
            raise ValueError(
                f"{key} must be between {MIN_DEADZONES} and {MAX_DEADZONES}, got {value}"
            )
        return value

    def __repr__(self) -> str:
        return f"<Site {self.name}>"
