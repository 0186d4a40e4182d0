"""
HTTP endpoint tests.

The test identity verifier treats ``Authorization: Bearer <id>`` as a
verified user id.
"""

import json
from datetime import timedelta

import pytest
from django.urls import reverse

from vouchman.exceptions import UpstreamFailure
from vouchman.models import CustomerReward, RewardStatus
from vouchman.tests.conftest import BUSINESS, CUSTOMER, OTHER_BUSINESS, backdate_attempt

pytestmark = pytest.mark.django_db


def post(client, name, data, user=CUSTOMER):
    kwargs = {"HTTP_AUTHORIZATION": f"Bearer {user}"} if user else {}
    return client.post(reverse(name), data=json.dumps(data), content_type="application/json", **kwargs)


def get(client, path, user=CUSTOMER):
    kwargs = {"HTTP_AUTHORIZATION": f"Bearer {user}"} if user else {}
    return client.get(path, **kwargs)


# ═══════════════════════════════════════════════════════════════════
# Authentication and request shape
# ═══════════════════════════════════════════════════════════════════


class TestAuthentication:
    def test_anonymous_is_rejected(self, client, location):
        response = post(client, "vouchman:vouch-start", {"location_id": str(location.pk)}, user=None)
        assert response.status_code == 401
        assert response.json() == {"error": "User not authenticated"}

    def test_default_verifier_uses_django_auth(self, client, settings, location, django_user_model):
        settings.VOUCHMAN = {
            **settings.VOUCHMAN,
            "IDENTITY_VERIFIER": "vouchman.adapters.django_auth.DjangoAuthIdentityVerifier",
        }
        settings.MIDDLEWARE = [
            "django.contrib.sessions.middleware.SessionMiddleware",
            "django.contrib.auth.middleware.AuthenticationMiddleware",
        ]
        user = django_user_model.objects.create_user(username="dewi", password="x")

        anonymous = client.post(
            reverse("vouchman:vouch-start"),
            data=json.dumps({"location_id": str(location.pk)}),
            content_type="application/json",
        )
        client.force_login(user)
        authenticated = client.post(
            reverse("vouchman:vouch-start"),
            data=json.dumps({"location_id": str(location.pk)}),
            content_type="application/json",
        )

        assert anonymous.status_code == 401
        assert authenticated.status_code == 201

    def test_missing_field(self, client, location):
        response = post(client, "vouchman:vouch-start", {})
        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_FIELD"
        assert response.json()["field"] == "location_id"

    def test_invalid_json(self, client, location):
        response = client.post(
            reverse("vouchman:vouch-start"),
            data="{not json",
            content_type="application/json",
            HTTP_AUTHORIZATION=f"Bearer {CUSTOMER}",
        )
        assert response.status_code == 400

    def test_wrong_method(self, client):
        response = get(client, reverse("vouchman:vouch-start"))
        assert response.status_code == 405


# ═══════════════════════════════════════════════════════════════════
# Vouch endpoints
# ═══════════════════════════════════════════════════════════════════


class TestVouchEndpoints:
    def test_start_created_then_running(self, client, location):
        first = post(client, "vouchman:vouch-start", {"location_id": str(location.pk)})
        second = post(client, "vouchman:vouch-start", {"location_id": str(location.pk)})

        assert first.status_code == 201
        assert first.json()["message"] == "Timer started"
        assert second.status_code == 200
        assert second.json()["message"] == "Timer already running"

    def test_start_unknown_location(self, client, db):
        response = post(client, "vouchman:vouch-start", {"location_id": "00000000-0000-0000-0000-000000000000"})
        assert response.status_code == 404
        assert response.json()["code"] == "LOCATION_NOT_FOUND"

    def test_stop_without_start(self, client, location):
        response = post(client, "vouchman:vouch-stop", {"location_id": str(location.pk)})
        assert response.status_code == 404

    def test_stop_too_early(self, client, location):
        post(client, "vouchman:vouch-start", {"location_id": str(location.pk)})

        response = post(client, "vouchman:vouch-stop", {"location_id": str(location.pk)})

        assert response.status_code == 200
        assert response.json() == {"message": "Dwell time not met.", "status": "failed_duration"}

    def test_full_flow(self, client, location, campaign):
        post(client, "vouchman:vouch-start", {"location_id": str(location.pk)})
        status_path = reverse("vouchman:vouch-status", args=[str(location.pk)])
        assert get(client, status_path).json()["status"] == "counting"

        backdate_attempt(CUSTOMER, location, timedelta(minutes=6))
        stop = post(client, "vouchman:vouch-stop", {"location_id": str(location.pk)})

        assert stop.status_code == 200
        assert stop.json()["status"] == "completed"
        pop_token = stop.json()["pop_token"]
        assert get(client, status_path).json() == {"status": "completed", "pop_token": pop_token}

        wallet = get(client, reverse("vouchman:my-rewards")).json()
        assert len(wallet) == 1
        assert wallet[0]["title"] == "Free Coffee"
        assert wallet[0]["status"] == "active"

        redeem = post(client, "vouchman:reward-redeem", {"unique_token": wallet[0]["qr_data"]}, user=BUSINESS)
        assert redeem.status_code == 200
        assert redeem.json()["message"] == "Voucher Redeemed Successfully!"
        assert redeem.json()["reward"]["description"] == "Free Coffee"

    def test_status_idle(self, client, location):
        response = get(client, reverse("vouchman:vouch-status", args=[str(location.pk)]))
        assert response.json() == {"status": "idle"}


# ═══════════════════════════════════════════════════════════════════
# Reward endpoints
# ═══════════════════════════════════════════════════════════════════


class TestRedeemEndpoint:
    def test_wrong_business(self, client, issued_reward):
        response = post(client, "vouchman:reward-redeem", {"unique_token": issued_reward.unique_token}, user=OTHER_BUSINESS)
        assert response.status_code == 403

    def test_not_found(self, client, db):
        response = post(client, "vouchman:reward-redeem", {"unique_token": "abc"}, user=BUSINESS)
        assert response.status_code == 404

    def test_missing_token(self, client, db):
        response = post(client, "vouchman:reward-redeem", {}, user=BUSINESS)
        assert response.status_code == 400

    def test_already_redeemed(self, client, issued_reward):
        post(client, "vouchman:reward-redeem", {"unique_token": issued_reward.unique_token}, user=BUSINESS)

        response = post(client, "vouchman:reward-redeem", {"unique_token": issued_reward.unique_token}, user=BUSINESS)

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "Voucher already redeemed"
        assert body["reward"]["redeemed_at"] is not None

    def test_void(self, client, issued_reward):
        CustomerReward.objects.filter(pk=issued_reward.pk).update(status=RewardStatus.VOID)

        response = post(client, "vouchman:reward-redeem", {"unique_token": issued_reward.unique_token}, user=BUSINESS)

        assert response.status_code == 400
        assert response.json()["error"] == "Voucher is not active (Status: void)"

    def test_upstream_failure_is_500(self, client, issued_reward, monkeypatch):
        def fail(*args, **kwargs):
            raise UpstreamFailure("STORE_FAILED")

        monkeypatch.setattr("vouchman.services.redemption.RedemptionService._consume", fail)

        response = post(client, "vouchman:reward-redeem", {"unique_token": issued_reward.unique_token}, user=BUSINESS)

        assert response.status_code == 500
        assert response.json()["code"] == "STORE_FAILED"


class TestMyRewards:
    def test_status_filter(self, client, issued_reward):
        assert get(client, reverse("vouchman:my-rewards") + "?status=redeemed").json() == []
        assert len(get(client, reverse("vouchman:my-rewards") + "?status=active").json()) == 1

    def test_other_customer_sees_nothing(self, client, issued_reward):
        assert get(client, reverse("vouchman:my-rewards"), user="cust-404").json() == []


# ═══════════════════════════════════════════════════════════════════
# Review endpoint
# ═══════════════════════════════════════════════════════════════════


class TestReviewEndpoint:
    def test_create(self, client, location, completed_vouch):
        response = post(
            client,
            "vouchman:reviews",
            {
                "location_id": str(location.pk),
                "pop_token": completed_vouch.pop_token,
                "rating": 5,
                "comment": "Mantap",
            },
        )
        assert response.status_code == 201
        assert response.json()["rating"] == 5

    def test_bad_pop_token(self, client, location, completed_vouch):
        response = post(
            client,
            "vouchman:reviews",
            {"location_id": str(location.pk), "pop_token": "FFFFFFFF", "rating": 5},
        )
        assert response.status_code == 403

    def test_duplicate(self, client, location, completed_vouch):
        data = {"location_id": str(location.pk), "pop_token": completed_vouch.pop_token, "rating": 4}
        post(client, "vouchman:reviews", data)

        assert post(client, "vouchman:reviews", data).status_code == 409


# ═══════════════════════════════════════════════════════════════════
# Malformed field types
# ═══════════════════════════════════════════════════════════════════


class TestFieldTypes:
    def test_numeric_voucher_token_is_bad_request(self, client, issued_reward):
        response = post(client, "vouchman:reward-redeem", {"unique_token": 12345}, user=BUSINESS)

        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_FIELD"
        assert response.json()["field"] == "unique_token"

    def test_numeric_pop_token_is_forbidden(self, client, location, completed_vouch):
        response = post(
            client,
            "vouchman:reviews",
            {"location_id": str(location.pk), "pop_token": 1234, "rating": 5},
        )

        assert response.status_code == 403
        assert response.json()["code"] == "POP_TOKEN_INVALID"

    def test_boolean_rating_is_bad_request(self, client, location, completed_vouch):
        response = post(
            client,
            "vouchman:reviews",
            {"location_id": str(location.pk), "pop_token": completed_vouch.pop_token, "rating": True},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_RATING"


# ═══════════════════════════════════════════════════════════════════
# Listings
# ═══════════════════════════════════════════════════════════════════


class TestListings:
    def test_issued_rewards_for_business(self, client, issued_reward):
        response = get(client, reverse("vouchman:issued-rewards"), user=BUSINESS)

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert body[0]["customer_id"] == CUSTOMER
        assert body[0]["status"] == "active"
        assert body[0]["redeemed_at"] is None
        assert "qr_data" not in body[0]

    def test_issued_rewards_scoped_to_caller(self, client, issued_reward):
        assert get(client, reverse("vouchman:issued-rewards"), user=OTHER_BUSINESS).json() == []

    def test_issued_rewards_require_identity(self, client, issued_reward):
        assert get(client, reverse("vouchman:issued-rewards"), user=None).status_code == 401

    def test_business_reviews(self, client, location, completed_vouch):
        post(
            client,
            "vouchman:reviews",
            {"location_id": str(location.pk), "pop_token": completed_vouch.pop_token, "rating": 4, "comment": "Enak"},
        )

        response = get(client, reverse("vouchman:reviews"), user=BUSINESS)

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert body[0]["rating"] == 4
        assert body[0]["customer_id"] == CUSTOMER
        assert body[0]["location"] == location.name
        assert get(client, reverse("vouchman:reviews"), user=OTHER_BUSINESS).json() == []

    def test_public_location_reviews_without_auth(self, client, location, completed_vouch):
        post(
            client,
            "vouchman:reviews",
            {"location_id": str(location.pk), "pop_token": completed_vouch.pop_token, "rating": 5},
        )

        response = get(client, reverse("vouchman:location-reviews", args=[str(location.pk)]), user=None)

        assert response.status_code == 200
        assert [r["rating"] for r in response.json()] == [5]
        assert "customer_id" not in response.json()[0]

    def test_public_location_reviews_unknown_location(self, client, db):
        response = get(client, reverse("vouchman:location-reviews", args=["nope"]), user=None)
        assert response.json() == []
