"""
Site procedures: creation, property update and dimension update.

Every procedure:
1. Runs inside a savepoint, so a failure leaves nothing half-written
2. Checks the caller's permission on the owning program
3. Recomputes derived metrics (footage, recommended bags)
4. Writes through ``save_site``, the single site write path
5. Returns an envelope instead of raising; failures carry an ErrorKind
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional, TypeVar

from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pilot_tracker.config import get_settings
from pilot_tracker.models.enums import HistoryEventType
from pilot_tracker.models.pilot_program import PilotProgram
from pilot_tracker.models.site import Site
from pilot_tracker.models.user import User
from pilot_tracker.schemas.result import (
    CreateSiteResult,
    DimensionsResult,
    OperationResult,
    UpdateSiteResult,
)
from pilot_tracker.schemas.site import SiteCreate, SiteDimensionsUpdate, SitePropertiesUpdate
from pilot_tracker.services import permissions
from pilot_tracker.services.audit import record_history, snapshot
from pilot_tracker.services.errors import ErrorKind, NotFoundError, SiteOperationError
from pilot_tracker.services.site_metrics import compute_site_metrics, recommend_bags

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=OperationResult)

# Changing any of these re-derives the bag recommendation
RECOMMENDATION_INPUTS = frozenset({
    "interior_working_surface_types",
    "quantity_deadzones",
    "square_footage",
})


def _classify(exc: Exception) -> tuple[ErrorKind, str]:
    """Map an exception raised inside a procedure to (kind, message)."""
    if isinstance(exc, SiteOperationError):
        return exc.kind, exc.message
    if isinstance(exc, (IntegrityError, DataError)):
        return ErrorKind.VALIDATION_FAILURE, str(exc.orig)
    if isinstance(exc, ValueError):
        return ErrorKind.VALIDATION_FAILURE, str(exc)
    return ErrorKind.DATABASE_ERROR, str(exc)


def _failure(result_cls: type[ResultT], exc: Exception, operation: str) -> ResultT:
    kind, message = _classify(exc)
    if kind is ErrorKind.DATABASE_ERROR:
        logger.exception(f"{operation} failed: {message}")
    else:
        logger.warning(f"{operation} rejected ({kind.value}): {message}")

    # create reports failures under "error", the update procedures under "message"
    if result_cls is CreateSiteResult:
        return result_cls(success=False, error=message, error_kind=kind)
    return result_cls(success=False, message=message, error_kind=kind)


def _density_or_default(density: Optional[float]) -> float:
    if density is None:
        return get_settings().default_gasifier_density_sqft_per_bag
    return density


async def save_site(
    db: AsyncSession,
    site: Site,
    *,
    actor: Optional[User],
    event: HistoryEventType,
    old_data: Optional[dict[str, Any]] = None,
    skip_audit: bool = False,
) -> Site:
    """
    Persist a site and, unless ``skip_audit`` is set, log a history row.

    This is the only place sites are written.
    """
    db.add(site)
    await db.flush()

    if not skip_audit:
        record_history(
            db,
            event=event,
            object_id=site.id,
            object_type="site",
            program_id=site.program_id,
            actor=actor,
            old_data=old_data,
            new_data=snapshot(site),
        )
        await db.flush()

    return site


async def _load_site(db: AsyncSession, site_id) -> Site:
    site = await db.get(Site, site_id)
    if site is None:
        raise NotFoundError("Site not found")
    return site


async def create_site_without_history(
    db: AsyncSession,
    actor: User,
    data: SiteCreate,
    *,
    skip_audit: bool = True,
) -> CreateSiteResult:
    """
    Create a site with derived footage and bag recommendation.

    No SiteCreation history row is written unless ``skip_audit`` is False.

    Returns:
        CreateSiteResult with the new id and derived values, or a failure
        envelope (not_found / permission_denied / validation_failure /
        database_error).
    """
    density = _density_or_default(data.min_efficacious_gasifier_density_sqft_per_bag)

    try:
        async with db.begin_nested():
            program = await db.get(PilotProgram, data.program_id)
            if program is None:
                raise NotFoundError("Pilot program not found")

            await permissions.require_program_editor(db, program.id, actor, action="create sites")

            metrics = compute_site_metrics(
                length=data.length,
                width=data.width,
                height=data.height,
                square_footage=data.square_footage,
                cubic_footage=data.cubic_footage,
                density_sqft_per_bag=density,
                surface_types=data.interior_working_surface_types,
                quantity_deadzones=data.quantity_deadzones,
            )

            site = Site(
                name=data.name,
                type=data.type,
                program_id=program.id,
                submission_defaults=data.submission_defaults,
                petri_defaults=data.petri_defaults,
                gasifier_defaults=data.gasifier_defaults,
                square_footage=metrics.square_footage,
                cubic_footage=metrics.cubic_footage,
                num_vents=data.num_vents,
                vent_placements=data.vent_placements,
                primary_function=data.primary_function,
                construction_material=data.construction_material,
                insulation_type=data.insulation_type,
                hvac_system_present=data.hvac_system_present,
                hvac_system_type=data.hvac_system_type,
                irrigation_system_type=data.irrigation_system_type,
                lighting_system=data.lighting_system,
                length=data.length,
                width=data.width,
                height=data.height,
                min_efficacious_gasifier_density_sqft_per_bag=density,
                recommended_placement_density_bags=metrics.recommended_bags,
                has_dead_zones=data.has_dead_zones,
                num_regularly_opened_ports=data.num_regularly_opened_ports,
                interior_working_surface_types=data.interior_working_surface_types,
                microbial_risk_zone=data.microbial_risk_zone,
                quantity_deadzones=data.quantity_deadzones,
                ventilation_strategy=data.ventilation_strategy,
                lastupdated_by=actor.id,
            )

            await save_site(
                db,
                site,
                actor=actor,
                event=HistoryEventType.SITE_CREATION,
                skip_audit=skip_audit,
            )
            program.total_sites = (program.total_sites or 0) + 1
            await db.flush()
    except (SiteOperationError, ValueError, SQLAlchemyError) as e:
        return _failure(CreateSiteResult, e, "create_site_without_history")

    logger.info(
        f"Created site {site.id} in program {program.id}: "
        f"sqft={metrics.square_footage}, bags={metrics.recommended_bags}"
    )

    return CreateSiteResult(
        success=True,
        site_id=site.id,
        square_footage=metrics.square_footage,
        cubic_footage=metrics.cubic_footage,
        recommended_bags=metrics.recommended_bags,
    )


async def update_site_properties(
    db: AsyncSession,
    actor: User,
    update: SitePropertiesUpdate,
) -> UpdateSiteResult:
    """
    Merge-patch a site's properties.

    The recommendation is re-derived only when surface types, deadzone
    count or square footage are supplied, using stored values for the
    inputs not supplied. If it can't be derived the stored value is kept.
    """
    patch = update.patch()

    try:
        async with db.begin_nested():
            site = await _load_site(db, update.site_id)
            await permissions.require_program_editor(db, site.program_id, actor)

            old_data = snapshot(site)

            if RECOMMENDATION_INPUTS & patch.keys():
                merged = {
                    field: patch.get(field, getattr(site, field))
                    for field in RECOMMENDATION_INPUTS
                }
                recommended = recommend_bags(
                    merged["square_footage"],
                    _density_or_default(site.min_efficacious_gasifier_density_sqft_per_bag),
                    merged["interior_working_surface_types"],
                    merged["quantity_deadzones"],
                )
                if recommended is not None:
                    patch["recommended_placement_density_bags"] = recommended

            for field, value in patch.items():
                setattr(site, field, value)
            site.updated_at = datetime.now(timezone.utc)
            site.lastupdated_by = actor.id

            await save_site(
                db,
                site,
                actor=actor,
                event=HistoryEventType.SITE_UPDATE,
                old_data=old_data,
            )
    except (SiteOperationError, ValueError, SQLAlchemyError) as e:
        return _failure(UpdateSiteResult, e, "update_site_properties")

    logger.info(f"Updated site {site.id}: {sorted(patch)}")

    return UpdateSiteResult(
        success=True,
        message="Site properties updated successfully",
        recommended_bags=site.recommended_placement_density_bags,
    )


async def update_site_dimensions_and_density(
    db: AsyncSession,
    actor: User,
    data: SiteDimensionsUpdate,
) -> DimensionsResult:
    """
    Replace a site's dimensions and density, re-deriving footage and bags.

    Surface types and deadzones come from the stored site.
    """
    density = _density_or_default(data.min_efficacious_gasifier_density_sqft_per_bag)

    try:
        async with db.begin_nested():
            site = await _load_site(db, data.site_id)
            await permissions.require_program_editor(
                db, site.program_id, actor, action="update site dimensions"
            )

            old_data = snapshot(site)
            metrics = compute_site_metrics(
                length=data.length,
                width=data.width,
                height=data.height,
                density_sqft_per_bag=density,
                surface_types=site.interior_working_surface_types,
                quantity_deadzones=site.quantity_deadzones,
            )

            site.length = data.length
            site.width = data.width
            site.height = data.height
            site.square_footage = metrics.square_footage
            site.cubic_footage = metrics.cubic_footage
            site.min_efficacious_gasifier_density_sqft_per_bag = density
            site.recommended_placement_density_bags = metrics.recommended_bags
            site.has_dead_zones = data.has_dead_zones
            site.num_regularly_opened_ports = data.num_regularly_opened_ports
            site.updated_at = datetime.now(timezone.utc)
            site.lastupdated_by = actor.id

            await save_site(
                db,
                site,
                actor=actor,
                event=HistoryEventType.SITE_UPDATE,
                old_data=old_data,
            )
    except (SiteOperationError, ValueError, SQLAlchemyError) as e:
        return _failure(DimensionsResult, e, "update_site_dimensions_and_density")

    logger.info(f"Updated dimensions for site {site.id}: {data.length}x{data.width}x{data.height}")

    return DimensionsResult(
        success=True,
        message="Site dimensions and density updated successfully",
        square_footage=metrics.square_footage,
        cubic_footage=metrics.cubic_footage,
        recommended_bags=metrics.recommended_bags,
    )
