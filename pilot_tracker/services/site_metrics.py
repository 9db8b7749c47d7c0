"""
Site metrics: footage derivation and gasifier bag recommendation.

Rules:
- Square footage is length x width when both are known, otherwise the
  supplied value. Cubic footage is square footage x height when all three
  dimensions are known, otherwise the supplied value.
- Recommended bags = ceil(square_footage / density)
  + 1 if any working surface is Wood or Unfinished Concrete
  + one bag per deadzone.
- No square footage (or no usable density) means no recommendation. None is
  "not computed", never zero bags.
"""
import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

from pilot_tracker.models.enums import ABSORBENT_SURFACES, InteriorWorkingSurfaceType


@dataclass(frozen=True)
class Footage:
    """Square and cubic footage resolved from dimensions or supplied values."""
    square_footage: Optional[float]
    cubic_footage: Optional[float]
    derived: bool = False


@dataclass(frozen=True)
class SiteMetrics:
    """Derived values returned to callers after a create or dimension update."""
    square_footage: Optional[float]
    cubic_footage: Optional[float]
    recommended_bags: Optional[int]


def derive_footage(
    length: Optional[float] = None,
    width: Optional[float] = None,
    height: Optional[float] = None,
    square_footage: Optional[float] = None,
    cubic_footage: Optional[float] = None,
) -> Footage:
    """
    Resolve square/cubic footage.

    Derived values win over supplied ones whenever length and width are
    both present.
    """
    if length is None or width is None:
        return Footage(square_footage=square_footage, cubic_footage=cubic_footage)

    derived_sqft = length * width
    derived_cubic = derived_sqft * height if height is not None else cubic_footage
    return Footage(square_footage=derived_sqft, cubic_footage=derived_cubic, derived=True)


def has_absorbent_surface(
    surface_types: Optional[Iterable[InteriorWorkingSurfaceType | str]],
) -> bool:
    """True if any surface is porous enough to need an extra bag."""
    if not surface_types:
        return False
    return any(InteriorWorkingSurfaceType(s) in ABSORBENT_SURFACES for s in surface_types)


def recommend_bags(
    square_footage: Optional[float],
    density_sqft_per_bag: Optional[float],
    surface_types: Optional[Iterable[InteriorWorkingSurfaceType | str]] = None,
    quantity_deadzones: Optional[int] = None,
) -> Optional[int]:
    """
    Recommended gasifier bag count for a site, or None if it can't be computed.

    Args:
        square_footage: Floor area in square feet
        density_sqft_per_bag: Area one bag covers; must be positive
        surface_types: Interior working surface types
        quantity_deadzones: Number of deadzones, one extra bag each

    Returns:
        Bag count, or None when square footage is unknown or density is
        missing / not positive.
    """
    if square_footage is None:
        return None
    if density_sqft_per_bag is None or density_sqft_per_bag <= 0:
        return None

    bags = math.ceil(square_footage / density_sqft_per_bag)

    if has_absorbent_surface(surface_types):
        bags += 1

    if quantity_deadzones is not None and quantity_deadzones > 0:
        bags += quantity_deadzones

    return bags


def compute_site_metrics(
    *,
    length: Optional[float] = None,
    width: Optional[float] = None,
    height: Optional[float] = None,
    square_footage: Optional[float] = None,
    cubic_footage: Optional[float] = None,
    density_sqft_per_bag: Optional[float] = None,
    surface_types: Optional[Iterable[InteriorWorkingSurfaceType | str]] = None,
    quantity_deadzones: Optional[int] = None,
) -> SiteMetrics:
    """Footage plus bag recommendation in one pass."""
    footage = derive_footage(length, width, height, square_footage, cubic_footage)
    return SiteMetrics(
        square_footage=footage.square_footage,
        cubic_footage=footage.cubic_footage,
        recommended_bags=recommend_bags(
            footage.square_footage,
            density_sqft_per_bag,
            surface_types,
            quantity_deadzones,
        ),
    )
