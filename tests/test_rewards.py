from decimal import Decimal

import pytest

from rewards.models import Reward, UserRewards, RewardTransaction
from rewards.points import points_for_total, award_order_points


@pytest.fixture
def five_off(db):
    return Reward.objects.create(title="$5 Off Next Order", points_cost=500, reward_type="discount",
                                 reward_value=Decimal("5.00"))


@pytest.mark.parametrize("total,points", [(Decimal("25.98"), 2), (Decimal("9.99"), 0), (Decimal("100"), 10)])
def test_points_for_total(total, points):
    assert points_for_total(total) == points


@pytest.mark.django_db
def test_award_order_points_skips_small_orders():
    assert award_order_points("u1", Decimal("9.99"), "EH1") is None
    assert not UserRewards.objects.exists()


@pytest.mark.django_db
class TestStatus:
    def test_guest(self, api, five_off):
        data = api.get("/api/rewards/status").json()["data"]
        assert data["isGuest"] is True
        assert data["userId"] == "guest"
        assert data["currentPoints"] == 0
        assert data["availableRewards"][0]["pointsCost"] == 500
        assert not UserRewards.objects.exists()

    def test_creates_balance_lazily(self, api):
        data = api.get("/api/rewards/status", HTTP_X_USER_ID="u7").json()["data"]
        assert data["isGuest"] is False
        assert UserRewards.objects.filter(user_id="u7").exists()

    def test_inactive_rewards_hidden(self, api, five_off):
        Reward.objects.filter(id=five_off.id).update(is_active=False)
        assert api.get("/api/rewards/status").json()["data"]["availableRewards"] == []


@pytest.mark.django_db
class TestEarnAndRedeem:
    def test_earn(self, api):
        resp = api.post("/api/rewards/earn", {"points": 120, "description": "Bonus"}, HTTP_X_USER_ID="u1")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert (data["newBalance"], data["totalEarned"]) == (120, 120)
        assert RewardTransaction.objects.get(user_id="u1").description == "Bonus"

    def test_earn_requires_user(self, api):
        resp = api.post("/api/rewards/earn", {"points": 5})
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "AUTH_REQUIRED"

    @pytest.mark.parametrize("points", [0, -5, "lots", 2.5])
    def test_earn_invalid_points(self, api, points):
        resp = api.post("/api/rewards/earn", {"points": points}, HTTP_X_USER_ID="u1")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_redeem(self, api, five_off):
        UserRewards.objects.create(user_id="u1", current_points=700, total_earned=700)
        resp = api.post("/api/rewards/redeem", {"rewardId": five_off.id, "pointsToRedeem": 500}, HTTP_X_USER_ID="u1")
        assert resp.status_code == 200
        assert resp.json()["data"]["newBalance"] == 200
        balance = UserRewards.objects.get(user_id="u1")
        assert (balance.current_points, balance.total_earned) == (200, 700)
        tx = RewardTransaction.objects.get(transaction_type="redeem")
        assert tx.reward_id == five_off.id
        assert tx.description == "Redeemed: $5 Off Next Order"

    def test_redeem_mismatch(self, api, five_off):
        UserRewards.objects.create(user_id="u1", current_points=700)
        resp = api.post("/api/rewards/redeem", {"rewardId": five_off.id, "pointsToRedeem": 400}, HTTP_X_USER_ID="u1")
        assert resp.json()["error"]["code"] == "POINTS_MISMATCH"

    def test_redeem_insufficient(self, api, five_off):
        UserRewards.objects.create(user_id="u1", current_points=100)
        resp = api.post("/api/rewards/redeem", {"rewardId": five_off.id, "pointsToRedeem": 500}, HTTP_X_USER_ID="u1")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INSUFFICIENT_POINTS"

    def test_redeem_without_balance_row(self, api, five_off):
        resp = api.post("/api/rewards/redeem", {"rewardId": five_off.id, "pointsToRedeem": 500}, HTTP_X_USER_ID="u9")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "USER_NOT_FOUND"

    def test_redeem_unknown_reward(self, api):
        resp = api.post("/api/rewards/redeem", {"rewardId": 999, "pointsToRedeem": 1}, HTTP_X_USER_ID="u1")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "NOT_FOUND"

    def test_redeem_requires_user(self, api, five_off):
        resp = api.post("/api/rewards/redeem", {"rewardId": five_off.id, "pointsToRedeem": 500}, HTTP_X_USER_ID="guest")
        assert resp.status_code == 401


@pytest.mark.django_db
class TestRewardAdmin:
    def test_list_includes_menu_item(self, api, admin_auth, burger, five_off):
        Reward.objects.create(title="Free Burger", points_cost=900, reward_type="free_item", menu_item=burger)
        data = api.get("/api/rewards", **admin_auth).json()["data"]
        assert [r["points_cost"] for r in data] == [500, 900]
        assert data[0]["menu_items"] is None
        assert data[1]["menu_items"] == {"name": "Classic Beef Burger", "price": 12.99, "image": ""}

    def test_create(self, api, admin_auth):
        resp = api.post("/api/rewards", {"title": "Upsize", "pointsCost": "250", "rewardType": "upgrade"}, **admin_auth)
        assert resp.status_code == 201
        assert Reward.objects.get(title="Upsize").points_cost == 250

    def test_create_missing_fields(self, api, admin_auth):
        resp = api.post("/api/rewards", {"title": "Nope"}, **admin_auth)
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_update_and_delete(self, api, admin_auth, five_off):
        resp = api.put(f"/api/rewards/{five_off.id}", {"pointsCost": 450, "isActive": False}, **admin_auth)
        assert resp.status_code == 200
        five_off.refresh_from_db()
        assert (five_off.points_cost, five_off.is_active) == (450, False)
        assert api.delete(f"/api/rewards/{five_off.id}", **admin_auth).status_code == 200
        assert api.put(f"/api/rewards/{five_off.id}", {"title": "x"}, **admin_auth).status_code == 404


@pytest.mark.django_db
def test_update_with_numeric_title(api, admin_auth, five_off):
    resp = api.put(f"/api/rewards/{five_off.id}", {"title": 500}, **admin_auth)
    assert resp.status_code == 200
    five_off.refresh_from_db()
    assert five_off.title == "500"


@pytest.mark.django_db
@pytest.mark.parametrize("points", ["²", 2 ** 31])
def test_earn_rejects_unparseable_points(api, points):
    resp = api.post("/api/rewards/earn", {"points": points}, HTTP_X_USER_ID="u1")
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"
