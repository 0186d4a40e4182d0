"""Vouch session tracker - start, stop and poll a dwell attempt.

State per (customer, location):

    idle -> pending -> completed
                    -> failed_duration -> idle

All cross-request guarantees come from the database: a partial unique
constraint allows one pending attempt per pair, and the pending ->
completed flip is a conditional UPDATE only one request can win.
"""

import logging
from dataclasses import dataclass

from django.db import IntegrityError, transaction
from django.utils import timezone

from vouchman.dwell import read_dwell
from vouchman.exceptions import Conflict, NotFound, UpstreamFailure
from vouchman.models import Location, LoyaltyTransaction, TransactionType, VouchAttempt
from vouchman.services.campaign import CampaignService
from vouchman.services.minter import mint_earn_transaction
from vouchman.signals import notify, vouch_completed
from vouchman.utils import parse_uuid

logger = logging.getLogger(__name__)


STATUS_IDLE = "idle"
STATUS_PENDING = "pending"
STATUS_COUNTING = "counting"
STATUS_COMPLETED = "completed"
STATUS_FAILED_DURATION = "failed_duration"


@dataclass
class StartResult:
    """Outcome of start()."""

    status: str
    created: bool
    attempt: VouchAttempt | None = None

    def as_dict(self) -> dict:
        return {"status": self.status, "created": self.created}


@dataclass
class StopResult:
    """Outcome of stop()."""

    status: str
    pop_token: str | None = None
    transaction: LoyaltyTransaction | None = None
    reward_issued: bool = False

    def as_dict(self) -> dict:
        data = {"status": self.status}
        if self.pop_token:
            data["pop_token"] = self.pop_token
        return data


@dataclass
class VouchStatus:
    """Polling snapshot returned by status()."""

    status: str
    pop_token: str | None = None
    seconds_remaining: float | None = None
    dwell_time_total: float | None = None

    def as_dict(self) -> dict:
        if self.status == STATUS_COMPLETED:
            return {"status": self.status, "pop_token": self.pop_token}
        if self.status == STATUS_COUNTING:
            return {
                "status": self.status,
                "seconds_remaining": self.seconds_remaining,
                "dwell_time_total": self.dwell_time_total,
            }
        return {"status": self.status}


class VouchService:
    """
    Dwell-time session tracking for (customer, location) pairs.

    Uses @classmethod for extensibility (consistent with other services).
    """

    @classmethod
    def start(cls, customer_id: str, location_id) -> StartResult:
        """
        Open a dwell attempt. Idempotent.

        Args:
            customer_id: Verified customer id
            location_id: Location UUID

        Returns:
            StartResult; created=False when a pending attempt already
            existed or the pair has already vouched

        Raises:
            NotFound: If the location does not exist or is inactive
        """
        location = cls._get_location(location_id)

        if cls._earn_transaction(customer_id, location.pk) is not None:
            return StartResult(status=STATUS_COMPLETED, created=False)

        for _ in range(2):
            try:
                with transaction.atomic():
                    attempt = VouchAttempt.objects.create(
                        customer_id=customer_id,
                        location=location,
                        status=VouchAttempt.Status.PENDING,
                    )
            except IntegrityError:
                # Unique pending constraint: an earlier start already holds the slot
                attempt = cls._pending_attempt(customer_id, location.pk)
                if attempt is not None:
                    logger.debug("Vouch already pending for %s at %s", customer_id, location.pk)
                    return StartResult(status=STATUS_PENDING, created=False, attempt=attempt)
                # The holder was stopped before we could read it
                if cls._earn_transaction(customer_id, location.pk) is not None:
                    return StartResult(status=STATUS_COMPLETED, created=False)
                continue

            logger.info("Vouch started: customer %s at location %s", customer_id, location.pk)
            return StartResult(status=STATUS_PENDING, created=True, attempt=attempt)

        logger.warning("Vouch start for %s at %s kept colliding with concurrent stops", customer_id, location.pk)
        return StartResult(status=STATUS_IDLE, created=False)

    @classmethod
    def stop(cls, customer_id: str, location_id) -> StopResult:
        """
        Close the pending attempt and judge the dwell time.

        On success the attempt becomes completed and an earn transaction
        is written in the same database transaction; campaign issuance runs
        afterwards and can never undo the vouch.

        Returns:
            StopResult with status completed (and pop_token) or failed_duration

        Raises:
            NotFound: If there is no pending attempt (including a concurrent
                stop that won the race)
            Conflict: If the pair already has an earn transaction
        """
        location_uuid = parse_uuid(location_id)
        if location_uuid is None:
            raise NotFound("ATTEMPT_NOT_FOUND")

        try:
            with transaction.atomic():
                attempt = cls._pending_attempt(customer_id, location_uuid, select_location=True)
                if attempt is None:
                    raise NotFound("ATTEMPT_NOT_FOUND")

                now = timezone.now()
                reading = read_dwell(attempt.start_time, now, attempt.location.dwell_time_minutes)
                logger.info(
                    "Vouch stop: customer %s at %s, elapsed %sms, required %sms",
                    customer_id,
                    location_uuid,
                    reading.elapsed_ms,
                    reading.required_ms,
                )

                if not reading.satisfied:
                    deleted, _ = VouchAttempt.objects.filter(
                        pk=attempt.pk,
                        status=VouchAttempt.Status.PENDING,
                    ).delete()
                    if not deleted:
                        raise NotFound("ATTEMPT_NOT_FOUND")
                    logger.warning("Dwell time not met for %s at %s", customer_id, location_uuid)
                    return StopResult(status=STATUS_FAILED_DURATION)

                claimed = VouchAttempt.objects.filter(
                    pk=attempt.pk,
                    status=VouchAttempt.Status.PENDING,
                ).update(status=VouchAttempt.Status.COMPLETED, completed_at=now)
                if not claimed:
                    raise NotFound("ATTEMPT_NOT_FOUND")

                earn = mint_earn_transaction(attempt, attempt.location.owner_id)
        except IntegrityError:
            raise Conflict("ALREADY_VOUCHED", location_id=str(location_uuid))

        logger.info("Vouch completed: customer %s at %s, POP %s", customer_id, location_uuid, earn.pop_token)
        notify(vouch_completed, LoyaltyTransaction, transaction=earn)

        reward = None
        try:
            reward = CampaignService.issue_for_vouch(customer_id, attempt.location, attempt.location.owner_id)
        except UpstreamFailure:
            # The earn transaction stands on its own as proof of the vouch
            logger.exception("Voucher issuance failed for customer %s at %s", customer_id, location_uuid)

        return StopResult(
            status=STATUS_COMPLETED,
            pop_token=earn.pop_token,
            transaction=earn,
            reward_issued=reward is not None,
        )

    @classmethod
    def status(cls, customer_id: str, location_id) -> VouchStatus:
        """
        Read-only polling view of the pair.

        completed (cached earn transaction) wins over counting (pending
        attempt), which wins over idle.
        """
        location_uuid = parse_uuid(location_id)
        if location_uuid is None:
            return VouchStatus(status=STATUS_IDLE)

        earn = cls._earn_transaction(customer_id, location_uuid)
        if earn is not None:
            return VouchStatus(status=STATUS_COMPLETED, pop_token=earn.pop_token)

        attempt = cls._pending_attempt(customer_id, location_uuid, select_location=True)
        if attempt is not None:
            reading = read_dwell(attempt.start_time, timezone.now(), attempt.location.dwell_time_minutes)
            return VouchStatus(
                status=STATUS_COUNTING,
                seconds_remaining=reading.seconds_remaining,
                dwell_time_total=reading.total_seconds,
            )

        return VouchStatus(status=STATUS_IDLE)

    @classmethod
    def _get_location(cls, location_id) -> Location:
        location_uuid = parse_uuid(location_id)
        if location_uuid is None:
            raise NotFound("LOCATION_NOT_FOUND", location_id=str(location_id))
        try:
            return Location.objects.get(pk=location_uuid, is_active=True)
        except Location.DoesNotExist:
            raise NotFound("LOCATION_NOT_FOUND", location_id=str(location_id))

    @classmethod
    def _pending_attempt(cls, customer_id: str, location_id, select_location: bool = False) -> VouchAttempt | None:
        qs = VouchAttempt.objects.filter(
            customer_id=customer_id,
            location_id=location_id,
            status=VouchAttempt.Status.PENDING,
        )
        if select_location:
            qs = qs.select_related("location")
        return qs.order_by("-start_time").first()

    @classmethod
    def _earn_transaction(cls, customer_id: str, location_id) -> LoyaltyTransaction | None:
        return (
            LoyaltyTransaction.objects.filter(
                customer_id=customer_id,
                location_id=location_id,
                transaction_type=TransactionType.EARN,
            )
            .order_by("-created_at")
            .first()
        )
