import logging
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError
from django.utils import timezone
from django.utils.dateparse import parse_datetime, parse_date
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .models import Voucher, DISCOUNT_TYPE_CHOICES
from .discounts import check_voucher, find_active, is_publicly_available, VoucherRejected
from api_responses import ok, fail, read_json, parse_id, parse_bool, to_money
from token_decorators import require_admin

logger = logging.getLogger(__name__)

DISCOUNT_TYPES = {value for value, _ in DISCOUNT_TYPE_CHOICES}


def _parse_amount(value, name):
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f'{name} must be a valid number')
    if not amount.is_finite() or amount < 0:
        raise ValueError(f'{name} cannot be negative')
    return amount


def _parse_expiry(value):
    if value in (None, ''):
        return None
    text = str(value).strip()
    dt = parse_datetime(text)
    if dt is None:
        d = parse_date(text)
        if d is None:
            raise ValueError('expiryDate must be an ISO date')
        dt = datetime(d.year, d.month, d.day, 23, 59, 59)
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt, dt_timezone.utc)
    return dt


def _parse_limit(value):
    if value in (None, '', 0, '0'):
        return None
    limit = int(value)
    if limit < 0:
        raise ValueError('usageLimit cannot be negative')
    return limit


# GET /api/vouchers/available
@csrf_exempt
@require_http_methods(['GET'])
def available_vouchers(request):
    now = timezone.now()
    vouchers = Voucher.objects.filter(is_active=True).order_by('-created_at', '-id')
    return ok([v.to_dict() for v in vouchers if is_publicly_available(v, now)])


# POST /api/vouchers/validate
@csrf_exempt
@require_http_methods(['POST'])
def validate_voucher(request):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    code = data.get('code')
    order_total = data.get('orderTotal')
    if not code or order_total is None or isinstance(order_total, bool):
        return fail('Please provide voucher code and order total', 'VALIDATION_ERROR', 400)
    try:
        order_total = _parse_amount(order_total, 'orderTotal')
    except ValueError as e:
        return fail(str(e), 'VALIDATION_ERROR', 400)

    voucher = find_active(code)
    if voucher is None:
        return fail('Invalid voucher code', 'INVALID_VOUCHER', 404)

    try:
        result = check_voucher(voucher, order_total)
    except VoucherRejected as e:
        return fail(e.message, e.code, e.status)

    return ok({
        'valid': True,
        'voucher': {
            'id': voucher.id,
            'code': voucher.code,
            'title': voucher.title,
            'description': voucher.description,
            'discount_type': voucher.discount_type,
            'discount_value': to_money(voucher.discount_value),
        },
        'discount': to_money(result.discount),
        'finalTotal': to_money(result.final_total),
    })


# POST /api/vouchers/apply
@csrf_exempt
@require_http_methods(['POST'])
def apply_voucher(request):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    code = data.get('code')
    if not code:
        return fail('Please provide voucher code', 'VALIDATION_ERROR', 400)

    voucher = find_active(code)
    if voucher is None:
        return fail('Voucher not found', 'NOT_FOUND', 404)

    # read-then-write, not an atomic increment
    voucher.used_count = (voucher.used_count or 0) + 1
    voucher.save(update_fields=['used_count', 'updated_at'])
    logger.info('Voucher %s applied, used_count=%s', voucher.code, voucher.used_count)

    return ok({
        'message': 'Voucher applied successfully',
        'voucher': {'code': voucher.code, 'used_count': voucher.used_count},
    })


# GET  /api/vouchers
# POST /api/vouchers
@csrf_exempt
@require_http_methods(['GET', 'POST'])
def vouchers(request):
    if request.method == 'POST':
        return create_voucher(request)
    return list_vouchers(request)


@require_admin
def list_vouchers(request):
    qs = Voucher.objects.all().order_by('-created_at', '-id')
    return ok([v.to_dict() for v in qs])


@require_admin
def create_voucher(request):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    code = str(data.get('code') or '').strip()
    title = str(data.get('title') or '').strip()
    discount_type = data.get('discountType')
    discount_value = data.get('discountValue')
    if not code or not title or not discount_type or discount_value in (None, ''):
        return fail('Please provide code, title, discountType, and discountValue', 'VALIDATION_ERROR', 400)
    if discount_type not in DISCOUNT_TYPES:
        return fail('discountType must be percentage or fixed', 'VALIDATION_ERROR', 400)

    try:
        voucher_data = {
            'code': code.upper(),
            'title': title,
            'description': data.get('description') or '',
            'discount_type': discount_type,
            'discount_value': _parse_amount(discount_value, 'discountValue'),
            'minimum_order': _parse_amount(data.get('minimumOrder') or 0, 'minimumOrder'),
            'expiry_date': _parse_expiry(data.get('expiryDate')),
            'usage_limit': _parse_limit(data.get('usageLimit')),
            'is_active': True,
            'used_count': 0,
        }
    except (TypeError, ValueError) as e:
        return fail(str(e), 'VALIDATION_ERROR', 400)

    if Voucher.objects.filter(code=voucher_data['code']).exists():
        return fail('Voucher code already exists', 'DUPLICATE_CODE', 400)
    try:
        voucher = Voucher.objects.create(**voucher_data)
    except IntegrityError:
        return fail('Voucher code already exists', 'DUPLICATE_CODE', 400)

    logger.info('Voucher %s created by admin %s', voucher.code, request.admin.id)
    return ok(voucher.to_dict(), status=201)


# PUT    /api/vouchers/<id>
# DELETE /api/vouchers/<id>
@csrf_exempt
@require_http_methods(['PUT', 'DELETE'])
def voucher_detail(request, voucher_id):
    vid = parse_id(voucher_id)
    if vid is None:
        return fail('Invalid voucher ID format', 'INVALID_ID', 400)
    if request.method == 'DELETE':
        return delete_voucher(request, vid)
    return update_voucher(request, vid)


@require_admin
def update_voucher(request, vid):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    try:
        voucher = Voucher.objects.get(id=vid)
    except Voucher.DoesNotExist:
        return fail('Voucher not found', 'NOT_FOUND', 404)

    try:
        if 'code' in data:
            voucher.code = str(data['code'] or '').upper()
            if not voucher.code.strip():
                raise ValueError('code cannot be empty')
        if 'title' in data:
            voucher.title = str(data['title'] or '').strip()
        if 'description' in data:
            voucher.description = data['description'] or ''
        if 'discountType' in data:
            if data['discountType'] not in DISCOUNT_TYPES:
                raise ValueError('discountType must be percentage or fixed')
            voucher.discount_type = data['discountType']
        if 'discountValue' in data:
            voucher.discount_value = _parse_amount(data['discountValue'], 'discountValue')
        if 'minimumOrder' in data:
            voucher.minimum_order = _parse_amount(data['minimumOrder'] or 0, 'minimumOrder')
        if 'expiryDate' in data:
            voucher.expiry_date = _parse_expiry(data['expiryDate'])
        if 'usageLimit' in data:
            voucher.usage_limit = _parse_limit(data['usageLimit'])
        if 'isActive' in data:
            voucher.is_active = parse_bool(data['isActive'])
    except (TypeError, ValueError) as e:
        return fail(str(e), 'VALIDATION_ERROR', 400)

    try:
        voucher.save()
    except IntegrityError:
        return fail('Voucher code already exists', 'DUPLICATE_CODE', 400)

    return ok(voucher.to_dict())


@require_admin
def delete_voucher(request, vid):
    deleted, _ = Voucher.objects.filter(id=vid).delete()
    if not deleted:
        return fail('Voucher not found', 'NOT_FOUND', 404)
    return ok(message='Voucher deleted successfully')
