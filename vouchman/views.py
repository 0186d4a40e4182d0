"""
Vouchman JSON endpoints.

Thin layer over the services:
    1. Resolves the verified caller through IDENTITY_VERIFIER
    2. Parses the JSON body
    3. Calls the service
    4. Maps VouchmanError to its HTTP status
"""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.utils.module_loading import import_string
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from vouchman.conf import vouchman_settings
from vouchman.exceptions import InvalidRequest, VouchmanError
from vouchman.protocols.identity import IdentityVerifier
from vouchman.services.redemption import RedemptionService
from vouchman.services.review import ReviewService
from vouchman.services.rewards import RewardService
from vouchman.services.vouch import VouchService

logger = logging.getLogger("vouchman.views")


def get_identity_verifier() -> IdentityVerifier:
    """Instantiate the configured IdentityVerifier."""
    return import_string(vouchman_settings.IDENTITY_VERIFIER)()


def error_response(exc: VouchmanError) -> JsonResponse:
    error = exc.as_dict()
    return JsonResponse(
        {"error": error["message"], "code": error["code"], **error["data"]},
        status=exc.status_code,
    )


@method_decorator(csrf_exempt, name="dispatch")
class VouchmanApiView(View):
    """
    Base view: authentication, JSON parsing and error mapping.

    Subclasses implement get/post with ``self.user_id`` set. Public views
    set ``require_identity = False`` and may see ``user_id`` as None.
    """

    user_id: str | None = None
    require_identity = True

    def dispatch(self, request, *args, **kwargs):
        self.user_id = get_identity_verifier().verify(request)
        if self.require_identity and not self.user_id:
            return JsonResponse({"error": "User not authenticated"}, status=401)

        try:
            return super().dispatch(request, *args, **kwargs)
        except VouchmanError as exc:
            if exc.status_code >= 500:
                logger.error("%s %s failed: %s", request.method, request.path, exc)
            return error_response(exc)

    def json_body(self) -> dict:
        try:
            data = json.loads(self.request.body or b"{}")
        except (json.JSONDecodeError, ValueError):
            raise InvalidRequest("MISSING_FIELD", message="Invalid JSON")
        if not isinstance(data, dict):
            raise InvalidRequest("MISSING_FIELD", message="Invalid JSON")
        return data

    @staticmethod
    def require(data: dict, field: str):
        value = data.get(field)
        if value in (None, ""):
            raise InvalidRequest("MISSING_FIELD", message=f"Missing field: {field}", field=field)
        return value


class VouchStartView(VouchmanApiView):
    """POST {location_id} -> 201 when a timer starts, 200 when it already runs."""

    def post(self, request):
        location_id = self.require(self.json_body(), "location_id")
        result = VouchService.start(self.user_id, location_id)
        message = {
            "pending": "Timer started" if result.created else "Timer already running",
            "completed": "Already vouched",
        }.get(result.status, "Timer not started, try again")
        return JsonResponse(
            {"message": message, **result.as_dict()},
            status=201 if result.created else 200,
        )


class VouchStopView(VouchmanApiView):
    """POST {location_id} -> {status: completed, pop_token} | {status: failed_duration}."""

    def post(self, request):
        location_id = self.require(self.json_body(), "location_id")
        result = VouchService.stop(self.user_id, location_id)
        message = "Vouch created!" if result.status == "completed" else "Dwell time not met."
        return JsonResponse({"message": message, **result.as_dict()})


class VouchStatusView(VouchmanApiView):
    """GET -> idle | counting | completed."""

    def get(self, request, location_id):
        return JsonResponse(VouchService.status(self.user_id, location_id).as_dict())


class RedeemView(VouchmanApiView):
    """POST {unique_token} by the business scanning the voucher."""

    def post(self, request):
        data = self.json_body()
        reward = RedemptionService.redeem(data.get("unique_token", ""), self.user_id)
        return JsonResponse(
            {
                "message": "Voucher Redeemed Successfully!",
                "reward": reward.redemption_info(),
            }
        )


class MyRewardsView(VouchmanApiView):
    """GET -> the caller's vouchers, newest first."""

    def get(self, request):
        rewards = RewardService.for_customer(self.user_id, status=request.GET.get("status") or None)
        return JsonResponse([RewardService.as_wallet_item(r) for r in rewards], safe=False)


class IssuedRewardsView(VouchmanApiView):
    """GET -> vouchers issued by the calling business, newest first."""

    def get(self, request):
        rewards = RewardService.for_business(self.user_id, status=request.GET.get("status") or None)
        return JsonResponse([RewardService.as_issued_item(r) for r in rewards], safe=False)


class ReviewsView(VouchmanApiView):
    """
    POST {location_id, pop_token, rating, comment} -> 201, as the customer.
    GET -> reviews of the calling business's locations.
    """

    def get(self, request):
        reviews = ReviewService.for_business(self.user_id)
        return JsonResponse(
            [{**ReviewService.as_item(r), "customer_id": r.customer_id, "location": r.location.name} for r in reviews],
            safe=False,
        )

    def post(self, request):
        data = self.json_body()
        review = ReviewService.submit(
            self.user_id,
            self.require(data, "location_id"),
            self.require(data, "pop_token"),
            self.require(data, "rating"),
            data.get("comment", ""),
        )
        return JsonResponse(ReviewService.as_item(review), status=201)


class LocationReviewsView(VouchmanApiView):
    """GET -> public reviews of one location, no authentication."""

    require_identity = False

    def get(self, request, location_id):
        reviews = ReviewService.for_location(location_id)
        return JsonResponse([ReviewService.as_item(r) for r in reviews], safe=False)
