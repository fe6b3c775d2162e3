"""Unit tests for the stored order line snapshot."""

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError
from services.store_service.models import SNAPSHOT_VERSION, OrderSnapshot, SnapshotLine


def _snapshot() -> OrderSnapshot:
    return OrderSnapshot(
        lines=(
            SnapshotLine(product_id=1, name="Green tea", unit_price=Decimal("250.00"), quantity=2),
            SnapshotLine(product_id=7, name="Teapot", unit_price=Decimal("1200.50"), quantity=1),
        )
    )


@pytest.mark.unit
def test_subtotal_and_quantity():
    snap = _snapshot()
    assert snap.subtotal == Decimal("1700.50")
    assert snap.total_quantity == 3


@pytest.mark.unit
def test_stored_form_is_versioned_json():
    stored = _snapshot().to_stored()

    assert stored["version"] == SNAPSHOT_VERSION
    assert stored["lines"][0] == {
        "product_id": 1,
        "name": "Green tea",
        "unit_price": "250.00",
        "quantity": 2,
    }
    # Must survive a trip through a JSON column
    assert OrderSnapshot.from_stored(json.dumps(stored)) == _snapshot()


@pytest.mark.unit
def test_legacy_bare_list_is_read_as_version_zero():
    legacy = '[{"product_id": 3, "name": "Honey", "price": 300, "quantity": 4}]'

    snap = OrderSnapshot.from_stored(legacy)

    assert snap.version == 0
    assert snap.lines[0].unit_price == Decimal("300")
    assert snap.subtotal == Decimal("1200")


@pytest.mark.unit
def test_missing_details_is_empty_snapshot():
    snap = OrderSnapshot.from_stored(None)
    assert snap.lines == ()
    assert snap.subtotal == Decimal("0")


@pytest.mark.unit
def test_snapshot_is_immutable():
    snap = _snapshot()
    with pytest.raises(ValidationError):
        snap.lines[0].quantity = 5


@pytest.mark.unit
def test_zero_quantity_line_rejected():
    with pytest.raises(ValidationError):
        SnapshotLine(product_id=1, name="x", unit_price=Decimal("1"), quantity=0)
