import pytest

from feedback.models import Feedback


@pytest.mark.django_db
class TestFeedback:
    def test_submit_defaults(self, api):
        resp = api.post("/api/feedback", {"rating": 5, "message": "  Great burgers  "})
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "Thank you for your feedback!"
        assert body["feedback"]["name"] == "Anonymous"
        assert body["feedback"]["category"] == "general"
        assert body["feedback"]["message"] == "Great burgers"
        assert body["feedback"]["email"] is None

    def test_message_required(self, api):
        resp = api.post("/api/feedback", {"rating": 4, "message": "   "})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "MISSING_MESSAGE"

    @pytest.mark.parametrize("rating", [0, 6, None, "bad"])
    def test_rating_range(self, api, rating):
        resp = api.post("/api/feedback", {"rating": rating, "message": "hi"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_RATING"

    def test_admin_list_newest_first(self, api, admin_auth):
        api.post("/api/feedback", {"rating": 3, "message": "first"})
        api.post("/api/feedback", {"rating": 4, "message": "second"})
        data = api.get("/api/feedback", **admin_auth).json()["data"]
        assert [f["message"] for f in data] == ["second", "first"]

    def test_list_requires_admin(self, api):
        assert api.get("/api/feedback").status_code == 401

    def test_delete(self, api, admin_auth):
        entry = Feedback.objects.create(rating=2, message="meh")
        assert api.delete(f"/api/feedback/{entry.id}", **admin_auth).status_code == 200
        assert not Feedback.objects.exists()
