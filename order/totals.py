"""
Pricing for new orders.

Prices always come from the menu table. Whatever price the client sends
with a line is ignored.
"""
import random
import re
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from menu.models import MenuItem
from api_responses import parse_id

# column limits of orders.total_amount (10 digits, 2 places) and order_items.quantity
MAX_ORDER_TOTAL = Decimal('99999999.99')
MAX_LINE_QUANTITY = 2 ** 31 - 1


class OrderRejected(Exception):
    def __init__(self, message, code, status=400):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status


@dataclass
class PricedLine:
    menu_item: MenuItem
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return self.menu_item.price * self.quantity


def generate_order_number():
    """Order number: "EH", epoch milliseconds, then a random 4-digit suffix. Not checked for collisions."""
    return f"EH{int(time.time() * 1000)}{random.randint(1000, 9999)}"


def phone_digits(phone):
    return re.sub(r'\D', '', str(phone or ''))


def _quantity(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return parse_id(value)
    return None


def price_order_lines(items):
    """
    Look up every requested line and price it.
    Returns (lines, total). Raises OrderRejected on the first bad line, before
    anything is written.
    """
    lines: List[PricedLine] = []
    total = Decimal('0.00')
    for entry in items:
        if not isinstance(entry, dict):
            raise OrderRejected('Each item must have a valid itemId and quantity', 'INVALID_ITEM_DATA')
        item_id = entry.get('itemId')
        quantity = _quantity(entry.get('quantity'))
        if not item_id or quantity is None or not 1 <= quantity <= MAX_LINE_QUANTITY:
            raise OrderRejected('Each item must have a valid itemId and quantity', 'INVALID_ITEM_DATA')

        menu_item = None
        pk = parse_id(item_id)
        if pk is not None:
            menu_item = MenuItem.objects.filter(id=pk).first()
        if menu_item is None:
            raise OrderRejected(f'Menu item with ID {item_id} not found', 'ITEM_NOT_FOUND', 404)
        if not menu_item.available:
            raise OrderRejected(f'{menu_item.name} is currently unavailable', 'ITEM_UNAVAILABLE')

        line = PricedLine(menu_item=menu_item, quantity=quantity)
        lines.append(line)
        total += line.subtotal
        if total > MAX_ORDER_TOTAL:
            raise OrderRejected('Order total is too large', 'INVALID_ITEM_DATA')
    return lines, total
