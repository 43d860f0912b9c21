import pytest
from django.core.management import call_command

from menu.models import MenuItem, Category
from rewards.models import Reward
from user.models import User
from voucher.models import Voucher


@pytest.mark.django_db
def test_seed_menu_is_idempotent():
    call_command("seed_menu")
    counts = (MenuItem.objects.count(), Category.objects.count(), Voucher.objects.count(), Reward.objects.count())
    call_command("seed_menu")
    assert (MenuItem.objects.count(), Category.objects.count(),
            Voucher.objects.count(), Reward.objects.count()) == counts
    assert counts == (6, 6, 3, 3)


@pytest.mark.django_db
def test_make_items_available(hidden_item):
    call_command("make_items_available")
    hidden_item.refresh_from_db()
    assert hidden_item.available is True


@pytest.mark.django_db
def test_create_admin_then_reset():
    call_command("create_admin", "--email", "Boss@EatHub.test", "--password", "first-pass")
    admin = User.objects.get(email="boss@eathub.test")
    assert admin.is_admin
    assert admin.username == "boss"

    call_command("create_admin", "--email", "boss@eathub.test", "--password", "second-pass")
    admin.refresh_from_db()
    assert admin.check_password("second-pass")
    assert User.objects.count() == 1
