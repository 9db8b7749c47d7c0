"""
Pydantic schemas for Site API endpoints and procedures.
"""
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

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
)


class SitePhysicalAttributes(BaseModel):
    """Optional physical/environmental attributes shared by create and update."""

    square_footage: Optional[float] = Field(None, ge=0, description="Floor area (sq ft)")
    cubic_footage: Optional[float] = Field(None, ge=0, description="Volume (cu ft)")
    num_vents: Optional[int] = Field(None, ge=0)
    vent_placements: Optional[list[VentPlacement]] = None
    # Facility details
    primary_function: Optional[PrimaryFunction] = None
    construction_material: Optional[ConstructionMaterial] = None
    insulation_type: Optional[InsulationType] = None
    # Environmental controls
    hvac_system_type: Optional[HVACSystemType] = None
    irrigation_system_type: Optional[IrrigationSystemType] = None
    lighting_system: Optional[LightingSystem] = None
    # Environmental descriptors
    interior_working_surface_types: Optional[list[InteriorWorkingSurfaceType]] = None
    # Range [1, 25] is enforced where the row is written
    quantity_deadzones: Optional[int] = None
    ventilation_strategy: Optional[VentilationStrategy] = None


class SiteCreate(SitePhysicalAttributes):
    """Parameters of create_site_without_history."""

    name: str = Field(..., min_length=1, max_length=100)
    type: SiteType
    program_id: UUID
    submission_defaults: Optional[dict[str, Any]] = None
    petri_defaults: Optional[list[Any]] = None
    gasifier_defaults: Optional[list[Any]] = None
    hvac_system_present: bool = False
    # Dimensions (feet); when length and width are given they override square_footage
    length: Optional[float] = Field(None, ge=0)
    width: Optional[float] = Field(None, ge=0)
    height: Optional[float] = Field(None, ge=0)
    min_efficacious_gasifier_density_sqft_per_bag: Optional[float] = Field(
        None, description="Square feet per bag; server default when omitted"
    )
    has_dead_zones: bool = False
    num_regularly_opened_ports: Optional[int] = Field(None, ge=0)
    microbial_risk_zone: MicrobialRiskZone = MicrobialRiskZone.MEDIUM


class SitePropertiesUpdate(SitePhysicalAttributes):
    """
    Parameters of update_site_properties.

    Merge-patch: any field left unset or null keeps its stored value.
    """

    site_id: UUID
    hvac_system_present: Optional[bool] = None
    microbial_risk_zone: Optional[MicrobialRiskZone] = None

    def patch(self) -> dict[str, Any]:
        """Supplied fields only, keyed by column name."""
        return self.model_dump(exclude={"site_id"}, exclude_none=True)


class SiteDimensionsUpdate(BaseModel):
    """Parameters of update_site_dimensions_and_density."""

    site_id: UUID
    length: float = Field(..., ge=0)
    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)
    min_efficacious_gasifier_density_sqft_per_bag: Optional[float] = None
    has_dead_zones: bool = False
    num_regularly_opened_ports: Optional[int] = Field(None, ge=0)


class SiteResponse(BaseModel):
    """Response schema for site retrieval."""

    id: UUID
    program_id: UUID
    name: str
    type: SiteType
    submission_defaults: Optional[dict[str, Any]] = None
    petri_defaults: Optional[list[Any]] = None
    gasifier_defaults: Optional[list[Any]] = None
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    square_footage: Optional[float] = None
    cubic_footage: Optional[float] = None
    num_vents: Optional[int] = None
    vent_placements: Optional[list[VentPlacement]] = None
    primary_function: Optional[PrimaryFunction] = None
    construction_material: Optional[ConstructionMaterial] = None
    insulation_type: Optional[InsulationType] = None
    hvac_system_present: bool = False
    hvac_system_type: Optional[HVACSystemType] = None
    irrigation_system_type: Optional[IrrigationSystemType] = None
    lighting_system: Optional[LightingSystem] = None
    min_efficacious_gasifier_density_sqft_per_bag: Optional[float] = None
    recommended_placement_density_bags: Optional[int] = None
    has_dead_zones: bool = False
    num_regularly_opened_ports: Optional[int] = None
    interior_working_surface_types: Optional[list[InteriorWorkingSurfaceType]] = None
    microbial_risk_zone: Optional[MicrobialRiskZone] = None
    quantity_deadzones: Optional[int] = None
    ventilation_strategy: Optional[VentilationStrategy] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class SiteListItem(BaseModel):
    """Summary schema for site listing."""

    id: UUID
    name: str
    type: SiteType
    square_footage: Optional[float] = None
    recommended_placement_density_bags: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class SiteListResponse(BaseModel):
    """Response schema for site listing."""

    sites: list[SiteListItem]
    total: int


class EnumTypesResponse(BaseModel):
    """Enumerated types of the wire contract, keyed by Postgres type name."""

    types: dict[str, list[str]]
