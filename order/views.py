import logging
from datetime import timedelta

from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .models import Order, OrderItem, ORDER_STATUSES
from .totals import OrderRejected, generate_order_number, phone_digits, price_order_lines
from rewards.points import award_order_points
from voucher.discounts import check_voucher, find_active, VoucherRejected
from api_responses import ok, fail, read_json, quantize, iso
from token_decorators import require_admin, acting_user_id

logger = logging.getLogger(__name__)


def _customer_info(data):
    info = data.get('customerInfo')
    if not isinstance(info, dict):
        return None
    name = str(info.get('name') or '').strip()
    phone = str(info.get('phone') or '').strip()
    address = str(info.get('address') or '').strip()
    if not name or not phone or not address:
        return None
    return {
        'customer_name': name,
        'customer_phone': phone,
        'customer_address': address,
        'customer_email': str(info.get('email') or '').strip(),
    }


def _voucher_discount(code, total):
    """(voucher_code, discount, final_amount) for an optional code on the order."""
    if not code:
        return None, quantize(0), quantize(total)
    voucher = find_active(code)
    if voucher is None:
        raise VoucherRejected('Invalid voucher code', 'INVALID_VOUCHER', 404)
    result = check_voucher(voucher, total)
    return voucher.code, result.discount, result.final_total


# GET  /api/orders
# POST /api/orders
@csrf_exempt
@require_http_methods(['GET', 'POST'])
def orders(request):
    if request.method == 'POST':
        return create_order(request)
    return list_orders(request)


def create_order(request):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    items = data.get('items')
    if not isinstance(items, list) or not items:
        return fail('Order must contain at least one item', 'INVALID_ITEMS', 400)

    customer = _customer_info(data)
    if customer is None:
        return fail('Customer information (name, phone, address) is required', 'INVALID_CUSTOMER_INFO', 400)
    if len(phone_digits(customer['customer_phone'])) < settings.MIN_PHONE_DIGITS:
        return fail(f'Phone number must contain at least {settings.MIN_PHONE_DIGITS} digits', 'INVALID_PHONE', 400)

    try:
        lines, total = price_order_lines(items)
        voucher_code, discount, final_amount = _voucher_discount(data.get('voucherCode'), total)
    except (OrderRejected, VoucherRejected) as e:
        return fail(e.message, e.code, e.status)

    user_id = acting_user_id(request)
    now = timezone.now()

    # header and lines are separate writes; a failed line insert leaves the header
    try:
        order = Order.objects.create(
            order_number=generate_order_number(),
            special_instructions=str(data.get('specialInstructions') or ''),
            total_amount=quantize(total),
            discount_amount=discount,
            final_amount=final_amount,
            voucher_code=voucher_code,
            user_id=user_id,
            status='received',
            estimated_delivery=now + timedelta(minutes=settings.ORDER_DELIVERY_MINUTES),
            **customer,
        )
        OrderItem.objects.bulk_create([
            OrderItem(order=order, menu_item=line.menu_item, name=line.menu_item.name,
                      price=line.menu_item.price, quantity=line.quantity)
            for line in lines
        ])
    except DatabaseError:
        logger.exception('Failed to create order')
        return fail('Failed to create order', 'ORDER_CREATION_FAILED', 500)

    logger.info('Order %s created: %s line(s), total %s', order.order_number, len(lines), order.total_amount)
    rewards = award_order_points(user_id, order.total_amount, order.order_number)

    return ok({
        'orderNumber': order.order_number,
        'estimatedDelivery': iso(order.estimated_delivery),
        'order': order.to_dict(),
        'rewards': rewards,
    }, status=201)


@require_admin
def list_orders(request):
    status = request.GET.get('status')
    qs = Order.objects.prefetch_related('items').order_by('-created_at', '-id')
    if status:
        if status not in ORDER_STATUSES:
            return fail('Invalid status value', 'INVALID_STATUS', 400)
        qs = qs.filter(status=status)
    return ok([o.to_dict() for o in qs])


# GET /api/orders/<order_number>
@csrf_exempt
@require_http_methods(['GET'])
def order_detail(request, order_number):
    order = Order.objects.prefetch_related('items').filter(order_number=order_number).first()
    if order is None:
        return fail('Order not found', 'ORDER_NOT_FOUND', 404)
    return ok(order.to_dict())


# PUT /api/orders/<order_number>/status
@csrf_exempt
@require_http_methods(['PUT'])
@require_admin
def update_order_status(request, order_number):
    try:
        data = read_json(request)
    except ValueError as e:
        return fail(str(e), 'INVALID_JSON', 400)

    status = data.get('status')
    if status not in ORDER_STATUSES:
        return fail(f"Invalid status. Must be one of: {', '.join(ORDER_STATUSES)}", 'INVALID_STATUS', 400)

    order = Order.objects.filter(order_number=order_number).first()
    if order is None:
        return fail('Order not found', 'ORDER_NOT_FOUND', 404)

    order.status = status
    order.save(update_fields=['status', 'updated_at'])
    logger.info('Order %s moved to %s by admin %s', order.order_number, status, request.admin.id)
    return ok(order.to_dict())
