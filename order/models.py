from django.db import models

from menu.models import MenuItem
from api_responses import to_money, iso

ORDER_STATUS_CHOICES = [
    ('received', 'Received'),
    ('preparing', 'Preparing'),
    ('out_for_delivery', 'Out for delivery'),
    ('delivered', 'Delivered'),
]
ORDER_STATUSES = [value for value, _ in ORDER_STATUS_CHOICES]


class Order(models.Model):
    order_number = models.CharField(max_length=32, unique=True)
    customer_name = models.CharField(max_length=255)
    customer_phone = models.CharField(max_length=32)
    customer_address = models.TextField()
    customer_email = models.CharField(max_length=255, blank=True, default='')
    special_instructions = models.TextField(blank=True, default='')
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    final_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    voucher_code = models.CharField(max_length=64, blank=True, null=True)
    # caller-supplied x-user-id, kept as text like the rewards tables
    user_id = models.CharField(max_length=64, blank=True, null=True)
    status = models.CharField(max_length=20, choices=ORDER_STATUS_CHOICES, default='received')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    estimated_delivery = models.DateTimeField()

    class Meta:
        db_table = 'orders'

    def __str__(self):
        return f"{self.order_number} - {self.customer_name}"

    def to_dict(self, with_items=True):
        data = {
            'id': self.id,
            'order_number': self.order_number,
            'customer_name': self.customer_name,
            'customer_phone': self.customer_phone,
            'customer_address': self.customer_address,
            'customer_email': self.customer_email,
            'special_instructions': self.special_instructions,
            'total_amount': to_money(self.total_amount),
            'discount_amount': to_money(self.discount_amount),
            'final_amount': to_money(self.final_amount),
            'voucher_code': self.voucher_code,
            'user_id': self.user_id,
            'status': self.status,
            'created_at': iso(self.created_at),
            'updated_at': iso(self.updated_at),
            'estimated_delivery': iso(self.estimated_delivery),
        }
        if with_items:
            data['order_items'] = [item.to_dict() for item in self.items.all()]
        return data


# name and price are copied from the menu at order time
class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    menu_item = models.ForeignKey(MenuItem, on_delete=models.SET_NULL, null=True, blank=True)
    name = models.CharField(max_length=100)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.IntegerField()

    class Meta:
        db_table = 'order_items'
        ordering = ['id']

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    def to_dict(self):
        return {
            'id': self.id,
            'menu_item_id': self.menu_item_id,
            'name': self.name,
            'price': to_money(self.price),
            'quantity': self.quantity,
        }
