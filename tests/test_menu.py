import base64
import json

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from menu.models import MenuItem


@pytest.mark.django_db
class TestMenuVisibility:
    def test_public_list_hides_unavailable(self, api, burger, fries, hidden_item):
        resp = api.get("/api/menu")
        assert resp.status_code == 200
        names = [it["name"] for it in resp.json()["data"]]
        assert names == ["Classic Beef Burger", "Crispy Fries"]

    def test_any_authorization_header_shows_everything(self, api, burger, hidden_item):
        resp = api.get("/api/menu", HTTP_AUTHORIZATION="Bearer whatever")
        names = {it["name"] for it in resp.json()["data"]}
        assert "Secret Shake" in names

    def test_detail_hides_unavailable_item(self, api, hidden_item):
        assert api.get(f"/api/menu/{hidden_item.id}").status_code == 404
        resp = api.get(f"/api/menu/{hidden_item.id}", HTTP_AUTHORIZATION="Bearer x")
        assert resp.status_code == 200
        assert resp.json()["data"]["available"] is False

    def test_detail_invalid_id(self, api):
        resp = api.get("/api/menu/abc")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_ID"

    def test_money_is_serialized_as_number(self, api, burger):
        item = api.get(f"/api/menu/{burger.id}").json()["data"]
        assert item["price"] == 12.99
        assert item["ingredients"] == ["Beef", "Bun"]


@pytest.mark.django_db
class TestFeaturedAndAnnouncement:
    def test_featured_ordering(self, api, burger, fries):
        MenuItem.objects.filter(id=fries.id).update(is_featured=True, featured_order=1)
        MenuItem.objects.filter(id=burger.id).update(is_featured=True, featured_order=2)
        names = [it["name"] for it in api.get("/api/menu/featured").json()["data"]]
        assert names == ["Crispy Fries", "Classic Beef Burger"]

    def test_announcement_absent(self, api, burger):
        body = api.get("/api/menu/announcement").json()
        assert body["success"] is True
        assert body["data"] is None

    def test_announcement_picks_lowest_priority(self, api, burger, fries):
        MenuItem.objects.filter(id=burger.id).update(is_announcement=True, announcement_priority=5)
        MenuItem.objects.filter(id=fries.id).update(is_announcement=True, announcement_priority=1,
                                                    announcement_title="Fries Friday")
        data = api.get("/api/menu/announcement").json()["data"]
        assert data["id"] == fries.id
        assert data["title"] == "Fries Friday"
        assert data["price"] == 4.99


@pytest.mark.django_db
class TestMenuAdmin:
    def test_create_requires_admin(self, api):
        resp = api.post("/api/menu", {"name": "X"})
        assert resp.status_code == 401

    def test_create_json(self, api, admin_auth):
        payload = {"name": "Iced Coffee", "description": "Cold brew", "price": "3.50",
                   "category": "drinks", "ingredients": '["Coffee", "Ice"]', "portionSize": "12 oz"}
        resp = api.post("/api/menu", payload, **admin_auth)
        assert resp.status_code == 201
        item = MenuItem.objects.get(name="Iced Coffee")
        assert item.ingredients == ["Coffee", "Ice"]
        assert item.portion_size == "12 oz"
        assert item.available is True

    def test_create_missing_fields(self, api, admin_auth):
        resp = api.post("/api/menu", {"name": "Nope", "price": 1}, **admin_auth)
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_create_negative_price(self, api, admin_auth):
        resp = api.post("/api/menu", {"name": "N", "description": "d", "price": -1, "category": "c"}, **admin_auth)
        assert resp.status_code == 400

    def test_create_multipart_embeds_image(self, client, admin_auth):
        image = SimpleUploadedFile("pic.png", b"\x89PNG fake", content_type="image/png")
        resp = client.post("/api/menu", {"name": "Pic Burger", "description": "d", "price": "9.99",
                                         "category": "beef_burgers", "image": image}, **admin_auth)
        assert resp.status_code == 201
        stored = MenuItem.objects.get(name="Pic Burger").image
        assert stored == "data:image/png;base64," + base64.b64encode(b"\x89PNG fake").decode()

    def test_update_partial(self, api, admin_auth, burger):
        resp = api.put(f"/api/menu/{burger.id}", {"available": False, "discountPrice": "10.99"}, **admin_auth)
        assert resp.status_code == 200
        burger.refresh_from_db()
        assert burger.available is False
        assert str(burger.discount_price) == "10.99"
        assert burger.name == "Classic Beef Burger"

    def test_update_missing(self, api, admin_auth):
        resp = api.put("/api/menu/9999", {"name": "x"}, **admin_auth)
        assert resp.status_code == 404

    def test_delete(self, api, admin_auth, burger):
        resp = api.delete(f"/api/menu/{burger.id}", **admin_auth)
        assert resp.status_code == 200
        assert not MenuItem.objects.filter(id=burger.id).exists()

    def test_unsupported_method(self, client):
        assert client.patch("/api/menu/1", json.dumps({}), content_type="application/json").status_code == 405


@pytest.mark.django_db
@pytest.mark.parametrize("raw_id", ["²", "١٢", "99999999999999999999999"])
def test_detail_rejects_non_ascii_and_oversized_ids(api, raw_id):
    resp = api.get(f"/api/menu/{raw_id}")
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_ID"
