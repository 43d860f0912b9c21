from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from voucher.discounts import VoucherRejected, check_voucher, is_publicly_available
from voucher.models import Voucher


def make(**kwargs):
    fields = {"code": "TEST", "title": "Test", "discount_type": "percentage",
              "discount_value": Decimal("10"), "minimum_order": Decimal("0"), "used_count": 0}
    fields.update(kwargs)
    return Voucher(**fields)


def test_percentage_with_minimum():
    result = check_voucher(make(minimum_order=Decimal("25")), Decimal("50"))
    assert result.discount == Decimal("5.00")
    assert result.final_total == Decimal("45.00")


def test_fixed_amount():
    result = check_voucher(make(discount_type="fixed", discount_value=Decimal("3.99")), Decimal("20"))
    assert result.final_total == Decimal("16.01")


@pytest.mark.parametrize("kind,value", [("percentage", "150"), ("fixed", "80")])
def test_discount_clamped_to_total(kind, value):
    result = check_voucher(make(discount_type=kind, discount_value=Decimal(value)), Decimal("40"))
    assert result.discount == Decimal("40.00")
    assert result.final_total == Decimal("0.00")


def test_rounds_to_two_places():
    result = check_voucher(make(discount_value=Decimal("15")), Decimal("25.99"))
    assert result.discount == Decimal("3.90")
    assert result.final_total == Decimal("22.09")


def test_expired():
    voucher = make(expiry_date=timezone.now() - timedelta(days=1))
    with pytest.raises(VoucherRejected) as exc:
        check_voucher(voucher, Decimal("50"))
    assert exc.value.code == "EXPIRED_VOUCHER"


def test_usage_limit():
    with pytest.raises(VoucherRejected) as exc:
        check_voucher(make(usage_limit=3, used_count=3), Decimal("50"))
    assert exc.value.code == "USAGE_LIMIT_REACHED"


def test_minimum_order():
    with pytest.raises(VoucherRejected) as exc:
        check_voucher(make(minimum_order=Decimal("25")), Decimal("24.99"))
    assert exc.value.code == "MINIMUM_ORDER_NOT_MET"


def test_public_availability():
    now = timezone.now()
    assert is_publicly_available(make(), now)
    assert not is_publicly_available(make(expiry_date=now - timedelta(seconds=1)), now)
    assert not is_publicly_available(make(usage_limit=1, used_count=1), now)
