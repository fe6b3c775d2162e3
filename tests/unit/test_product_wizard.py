"""Unit tests for the admin product entry wizard."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from libs.common.errors import InvalidInputError, NotFoundError
from services.store_service.services.product_wizard import (
    WIZARD_STEPS,
    ProductWizardRegistry,
)


class FakeClock:
    def __init__(self):
        self.now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now


ANSWERS = ["Oolong", "tea", "-", "450,50", "200", "12", "-"]


@pytest.mark.unit
def test_full_walkthrough_builds_product():
    registry = ProductWizardRegistry()
    session = registry.start(111)

    for answer in ANSWERS:
        assert not session.completed
        session.submit(answer)

    assert session.completed
    assert session.current_step is None

    product = session.to_product_create()
    assert product.name == "Oolong"
    assert product.category == "tea"
    assert product.description is None
    assert product.price == Decimal("450.50")
    assert product.purchase_price == Decimal("200.00")
    assert product.stock == 12
    assert product.image_url is None


@pytest.mark.unit
def test_invalid_answer_keeps_current_step():
    session = ProductWizardRegistry().start(111)
    session.submit("Oolong")
    session.submit("-")
    session.submit("-")
    assert session.current_step == "price"

    with pytest.raises(InvalidInputError):
        session.submit("cheap")
    with pytest.raises(InvalidInputError):
        session.submit("0")

    assert session.current_step == "price"
    session.submit("100")
    assert session.current_step == "purchase_price"


@pytest.mark.unit
def test_required_step_cannot_be_skipped():
    session = ProductWizardRegistry().start(111)
    with pytest.raises(InvalidInputError):
        session.submit("-")
    assert session.current_step == WIZARD_STEPS[0][0]


@pytest.mark.unit
def test_unfinished_wizard_cannot_build_product():
    session = ProductWizardRegistry().start(111)
    session.submit("Oolong")
    with pytest.raises(InvalidInputError):
        session.to_product_create()


@pytest.mark.unit
def test_sessions_are_per_admin():
    registry = ProductWizardRegistry()
    registry.start(111).submit("Oolong")
    registry.start(222)

    assert registry.get(111).current_step == "category"
    assert registry.get(222).current_step == "name"
    assert len(registry) == 2


@pytest.mark.unit
def test_restart_discards_previous_session():
    registry = ProductWizardRegistry()
    registry.start(111).submit("Oolong")

    session = registry.start(111)

    assert session.current_step == "name"
    assert session.values == {}


@pytest.mark.unit
def test_cancel_and_finish_drop_session():
    registry = ProductWizardRegistry()
    registry.start(111)
    assert registry.cancel(111) is True
    assert registry.cancel(111) is False

    registry.start(222)
    registry.finish(222)
    with pytest.raises(NotFoundError):
        registry.get(222)


@pytest.mark.unit
def test_expired_session_is_dropped():
    clock = FakeClock()
    registry = ProductWizardRegistry(ttl=timedelta(minutes=10), clock=clock)
    registry.start(111)

    clock.now += timedelta(minutes=11)

    with pytest.raises(NotFoundError):
        registry.get(111)
    assert len(registry) == 0


def _session_at_price():
    session = ProductWizardRegistry().start(111)
    session.submit("Oolong")
    session.submit("-")
    session.submit("-")
    return session


@pytest.mark.unit
@pytest.mark.parametrize("raw", ["0.001", "1e9", "12345678901", "-5", "NaN", "Infinity"])
def test_price_outside_product_constraints_is_rejected(raw):
    session = _session_at_price()

    with pytest.raises(InvalidInputError):
        session.submit(raw)

    assert session.current_step == "price"
    assert "price" not in session.values


@pytest.mark.unit
def test_overlong_name_is_rejected_on_its_step():
    session = ProductWizardRegistry().start(111)

    with pytest.raises(InvalidInputError):
        session.submit("x" * 256)

    assert session.current_step == "name"
    session.submit("x" * 255)
    assert session.current_step == "category"


@pytest.mark.unit
def test_overlong_category_and_negative_purchase_price_are_rejected():
    session = ProductWizardRegistry().start(111)
    session.submit("Oolong")
    with pytest.raises(InvalidInputError):
        session.submit("c" * 101)
    session.submit("tea")
    session.submit("-")
    session.submit("450")
    with pytest.raises(InvalidInputError):
        session.submit("-1")
    assert session.current_step == "purchase_price"


@pytest.mark.unit
def test_every_accepted_walkthrough_builds_a_valid_product():
    session = ProductWizardRegistry().start(111)
    for answer in ["x" * 255, "c" * 100, "-", "99999999.99", "0", "0", "-"]:
        session.submit(answer)

    product = session.to_product_create()

    assert product.price == Decimal("99999999.99")
    assert product.purchase_price == 0


@pytest.mark.unit
def test_corrupted_values_raise_invalid_input_not_validation_error():
    session = ProductWizardRegistry().start(111)
    for answer in ANSWERS:
        session.submit(answer)
    session.values["price"] = "0.001"

    with pytest.raises(InvalidInputError):
        session.to_product_create()
