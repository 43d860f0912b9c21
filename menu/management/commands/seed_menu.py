from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.utils import timezone

from menu.models import MenuItem, Category
from rewards.models import Reward
from voucher.models import Voucher

SAMPLE_CATEGORIES = [
    # name, display name, icon, colour
    ("beef_burgers", "Beef Burgers", "🍔", "#FFE5E5"),
    ("chicken_burgers", "Chicken Burgers", "🍗", "#FFF4E5"),
    ("box_deals", "Box Deals", "📦", "#E5F6FF"),
    ("potatoes", "Potatoes", "🍟", "#FFFBE5"),
    ("deals_night", "Night Deals", "🌙", "#EDE5FF"),
    ("drinks", "Drinks", "🥤", "#E5FFEE"),
]

SAMPLE_ITEMS = [
    {
        "name": "Classic Beef Burger",
        "description": "Juicy beef patty with lettuce, tomato, onion, and our special sauce",
        "price": Decimal("12.99"),
        "category": "beef_burgers",
        "ingredients": ["Beef", "Lettuce", "Tomato", "Onion", "Special Sauce", "Bun"],
        "portion_size": "Serves 1",
        "is_featured": True,
        "featured_order": 1,
    },
    {
        "name": "Crispy Chicken Burger",
        "description": "Crispy chicken breast with lettuce, mayo, and pickles",
        "price": Decimal("11.99"),
        "category": "chicken_burgers",
        "ingredients": ["Chicken Breast", "Lettuce", "Mayo", "Pickles", "Bun"],
        "portion_size": "Serves 1",
        "is_featured": True,
        "featured_order": 2,
    },
    {
        "name": "Family Box Deal",
        "description": "2 Burgers, 2 Fries, 2 Drinks - Perfect for sharing",
        "price": Decimal("24.99"),
        "category": "box_deals",
        "ingredients": ["Burgers", "Fries", "Drinks"],
        "portion_size": "Serves 2",
    },
    {
        "name": "Crispy Fries",
        "description": "Golden crispy potato fries with seasoning",
        "price": Decimal("4.99"),
        "category": "potatoes",
        "ingredients": ["Potatoes", "Salt", "Seasoning"],
        "portion_size": "Regular",
    },
    {
        "name": "Tonight Special Deal",
        "description": "Burger + Fries + Drink at special night price",
        "price": Decimal("15.99"),
        "category": "deals_night",
        "ingredients": ["Burger", "Fries", "Drink"],
        "portion_size": "Serves 1",
        "is_announcement": True,
        "announcement_title": "Tonight Only",
        "announcement_subtitle": "Burger, fries and a drink",
        "announcement_price": Decimal("13.99"),
        "announcement_priority": 1,
    },
    {
        "name": "Fresh Cola",
        "description": "Ice-cold cola with a refreshing taste",
        "price": Decimal("2.99"),
        "category": "drinks",
        "ingredients": ["Cola", "Ice"],
        "portion_size": "16 oz",
    },
]

SAMPLE_VOUCHERS = [
    # code, title, description, type, value, minimum order, days valid
    ("WELCOME10", "Welcome Discount", "Get 10% off your first order", "percentage", "10.00", "25.00", 30),
    ("SAVE5", "Save $5", "Save $5 on orders over $30", "fixed", "5.00", "30.00", 14),
    ("FREESHIP", "Free Delivery", "Free delivery on orders over $20", "fixed", "3.99", "20.00", 7),
]

SAMPLE_REWARDS = [
    ("$5 Off Next Order", "Get $5 off your next order", 500, "discount", "5.00"),
    ("$10 Off Next Order", "Get $10 off your next order", 1000, "discount", "10.00"),
    ("Free Delivery", "Free delivery on your next order", 300, "discount", "3.99"),
]


class Command(BaseCommand):
    help = "Load sample menu items, categories, vouchers and rewards. Existing rows are left alone."

    def add_arguments(self, parser):
        parser.add_argument("--skip-vouchers", action="store_true")
        parser.add_argument("--skip-rewards", action="store_true")

    def handle(self, *args, **opts):
        created = {"categories": 0, "items": 0, "vouchers": 0, "rewards": 0}

        for order, (name, display_name, icon, colour) in enumerate(SAMPLE_CATEGORIES, start=1):
            _, was_created = Category.objects.get_or_create(
                name=name,
                defaults={"display_name": display_name, "icon": icon,
                          "background_color": colour, "sort_order": order},
            )
            created["categories"] += was_created

        for item in SAMPLE_ITEMS:
            fields = dict(item)
            _, was_created = MenuItem.objects.get_or_create(name=fields.pop("name"), defaults=fields)
            created["items"] += was_created

        if not opts["skip_vouchers"]:
            now = timezone.now()
            for code, title, description, kind, value, minimum, days in SAMPLE_VOUCHERS:
                _, was_created = Voucher.objects.get_or_create(
                    code=code,
                    defaults={"title": title, "description": description, "discount_type": kind,
                              "discount_value": Decimal(value), "minimum_order": Decimal(minimum),
                              "expiry_date": now + timedelta(days=days)},
                )
                created["vouchers"] += was_created

        if not opts["skip_rewards"]:
            for title, description, cost, kind, value in SAMPLE_REWARDS:
                _, was_created = Reward.objects.get_or_create(
                    title=title,
                    defaults={"description": description, "points_cost": cost,
                              "reward_type": kind, "reward_value": Decimal(value)},
                )
                created["rewards"] += was_created

        summary = ", ".join(f"{count} {kind}" for kind, count in created.items())
        self.stdout.write(self.style.SUCCESS(f"Seeded {summary}."))
