"""
Voucher rules shared by the voucher endpoints and order creation.

Validation is read-only. Incrementing ``used_count`` is a separate step
(``apply``), so two callers can both validate a voucher that has one use left.
"""
from dataclasses import dataclass
from decimal import Decimal

from django.utils import timezone

from api_responses import quantize


class VoucherRejected(Exception):
    def __init__(self, message, code, status=400):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status


@dataclass
class Discount:
    discount: Decimal
    final_total: Decimal


def is_expired(voucher, now=None):
    now = now or timezone.now()
    return voucher.expiry_date is not None and voucher.expiry_date < now


def limit_reached(voucher):
    return voucher.usage_limit is not None and voucher.used_count >= voucher.usage_limit


def is_publicly_available(voucher, now=None):
    return not is_expired(voucher, now) and not limit_reached(voucher)


def discount_amount(voucher, order_total: Decimal) -> Decimal:
    if voucher.discount_type == 'percentage':
        amount = order_total * Decimal(voucher.discount_value) / Decimal(100)
    elif voucher.discount_type == 'fixed':
        amount = Decimal(voucher.discount_value)
    else:
        amount = Decimal(0)
    return min(amount, order_total)


def check_voucher(voucher, order_total, now=None) -> Discount:
    order_total = Decimal(order_total)
    if is_expired(voucher, now):
        raise VoucherRejected('Voucher has expired', 'EXPIRED_VOUCHER')
    if limit_reached(voucher):
        raise VoucherRejected('Voucher usage limit reached', 'USAGE_LIMIT_REACHED')
    if order_total < voucher.minimum_order:
        raise VoucherRejected(f'Minimum order amount is ${voucher.minimum_order}', 'MINIMUM_ORDER_NOT_MET')

    discount = quantize(discount_amount(voucher, order_total))
    return Discount(discount=discount, final_total=quantize(order_total - discount))


def find_active(code):
    from .models import Voucher

    if not code:
        return None
    return Voucher.objects.filter(code=str(code).strip().upper(), is_active=True).first()
