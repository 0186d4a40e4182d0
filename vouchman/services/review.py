"""Review service - reviews gated by a proof of presence."""

import logging

from django.db import IntegrityError, transaction

from vouchman.exceptions import Conflict, InvalidRequest
from vouchman.gates import Gates
from vouchman.models import Review
from vouchman.utils import parse_uuid

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Service for location reviews.

    Uses @classmethod for extensibility (consistent with other services).
    """

    @classmethod
    def submit(
        cls,
        customer_id: str,
        location_id,
        pop_token: str,
        rating: int,
        comment: str = "",
    ) -> Review:
        """
        Submit a review for a location the customer vouched for.

        Args:
            customer_id: Verified customer id
            location_id: Location UUID
            pop_token: POP token from the completed vouch
            rating: 1 to 5
            comment: Free text

        Returns:
            Created Review

        Raises:
            InvalidRequest: If the rating is not an integer from 1 to 5
            Forbidden: If the POP token does not prove a vouch here
            Conflict: If this vouch was already reviewed
        """
        rating = cls._parse_rating(rating)

        vouch = Gates.pop_token_proof(customer_id, location_id, pop_token)

        try:
            with transaction.atomic():
                review = Review.objects.create(
                    customer_id=customer_id,
                    location_id=vouch.location_id,
                    business_id=vouch.business_id,
                    loyalty_transaction=vouch,
                    rating=rating,
                    comment=comment or "",
                )
        except IntegrityError:
            raise Conflict("REVIEW_EXISTS")

        logger.info("Review %s submitted by %s for location %s", review.pk, customer_id, vouch.location_id)
        return review

    @classmethod
    def for_location(cls, location_id, limit: int = 50) -> list[Review]:
        """Reviews of a location, newest first."""
        location_uuid = parse_uuid(location_id)
        if location_uuid is None:
            return []
        return list(Review.objects.filter(location_id=location_uuid).order_by("-created_at")[:limit])

    @classmethod
    def for_business(cls, business_id: str, limit: int = 50) -> list[Review]:
        """Reviews across all locations of a business, newest first."""
        return list(
            Review.objects.filter(business_id=business_id)
            .select_related("location")
            .order_by("-created_at")[:limit]
        )

    @staticmethod
    def as_item(review: Review) -> dict:
        return {
            "id": review.pk,
            "location_id": str(review.location_id),
            "rating": review.rating,
            "comment": review.comment,
            "created_at": review.created_at.isoformat(),
        }

    @classmethod
    def _parse_rating(cls, rating) -> int:
        """Whole number 1..5. Booleans and fractional values are rejected."""
        if isinstance(rating, bool) or (isinstance(rating, float) and not rating.is_integer()):
            raise InvalidRequest("INVALID_RATING")
        try:
            rating = int(rating)
        except (TypeError, ValueError):
            raise InvalidRequest("INVALID_RATING")
        if not 1 <= rating <= 5:
            raise InvalidRequest("INVALID_RATING", rating=rating)
        return rating
