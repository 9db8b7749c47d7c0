"""
Business logic services for Pilot Tracker.
"""
from pilot_tracker.services.errors import (
    ErrorKind,
    NotFoundError,
    PermissionDeniedError,
    SiteOperationError,
    ValidationFailureError,
)
from pilot_tracker.services.site_metrics import (
    Footage,
    SiteMetrics,
    compute_site_metrics,
    derive_footage,
    recommend_bags,
)

__all__ = [
    # Errors
    "ErrorKind",
    "SiteOperationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ValidationFailureError",
    # Derived site metrics
    "Footage",
    "SiteMetrics",
    "derive_footage",
    "recommend_bags",
    "compute_site_metrics",
]
