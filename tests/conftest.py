import json
from decimal import Decimal

import pytest

from menu.models import MenuItem, Category
from token_decorators import issue_token, ADMIN, CUSTOMER
from user.models import User


@pytest.fixture(autouse=True)
def _settings(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.PBKDF2PasswordHasher"]
    settings.MENU_IMAGE_BACKEND = "embedded"


@pytest.fixture
def admin_user(db):
    return User.objects.create(username="admin", email="admin@eathub.test", password="secret123", usertype=ADMIN)


@pytest.fixture
def customer(db):
    return User.objects.create(username="sam", email="sam@eathub.test", password="secret123",
                               full_name="Sam Lee", usertype=CUSTOMER)


@pytest.fixture
def admin_auth(admin_user):
    return {"HTTP_AUTHORIZATION": f"Bearer {issue_token(admin_user)}"}


@pytest.fixture
def customer_auth(customer):
    return {"HTTP_AUTHORIZATION": f"Bearer {issue_token(customer)}"}


@pytest.fixture
def burger(db):
    return MenuItem.objects.create(name="Classic Beef Burger", description="Beef patty", price=Decimal("12.99"),
                                   category="beef_burgers", ingredients=["Beef", "Bun"])


@pytest.fixture
def fries(db):
    return MenuItem.objects.create(name="Crispy Fries", description="Potato fries", price=Decimal("4.99"),
                                   category="potatoes")


@pytest.fixture
def hidden_item(db):
    return MenuItem.objects.create(name="Secret Shake", description="Off menu", price=Decimal("6.50"),
                                   category="drinks", available=False)


@pytest.fixture
def burgers_category(db):
    return Category.objects.create(name="beef_burgers", display_name="Beef Burgers", icon="🍔", sort_order=1)


@pytest.fixture
def api(client):
    """Test client helpers that send JSON bodies."""

    class Api:
        def get(self, path, **extra):
            return client.get(path, **extra)

        def post(self, path, data=None, **extra):
            return client.post(path, json.dumps(data or {}), content_type="application/json", **extra)

        def put(self, path, data=None, **extra):
            return client.put(path, json.dumps(data or {}), content_type="application/json", **extra)

        def delete(self, path, **extra):
            return client.delete(path, **extra)

    return Api()
