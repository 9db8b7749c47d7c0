import uuid

import pytest

from pilot_tracker.models.enums import PG_ENUM_NAMES, SiteType
from pilot_tracker.models.site import MAX_DEADZONES, MIN_DEADZONES, Site


def _site(**kwargs) -> Site:
    return Site(name="North House", type=SiteType.GREENHOUSE, program_id=uuid.uuid4(), **kwargs)


@pytest.mark.parametrize("value", [MIN_DEADZONES, 12, MAX_DEADZONES, None])
def test_deadzones_in_range_accepted(value):
    site = _site(quantity_deadzones=value)
    assert site.quantity_deadzones == value


@pytest.mark.parametrize("value", [0, -1, 26, 100])
def test_deadzones_out_of_range_rejected(value):
    with pytest.raises(ValueError, match="quantity_deadzones"):
        _site(quantity_deadzones=value)


def test_deadzones_rejected_on_assignment():
    site = _site(quantity_deadzones=3)
    with pytest.raises(ValueError):
        site.quantity_deadzones = 30
    assert site.quantity_deadzones == 3


def test_deadzone_range_has_check_constraint():
    names = {c.name for c in Site.__table__.constraints}
    assert "ck_sites_quantity_deadzones_range" in names


def test_enum_columns_store_values():
    column_type = Site.__table__.c["type"].type
    assert column_type.name == PG_ENUM_NAMES[SiteType]
    assert "Production Facility" in column_type.enums
