"""Pytest fixtures for Vouchman tests."""

from datetime import timedelta

import pytest
from django.utils import timezone

from vouchman.models import Campaign, Location, VouchAttempt

BUSINESS = "biz-001"
OTHER_BUSINESS = "biz-002"
CUSTOMER = "cust-001"
OTHER_CUSTOMER = "cust-002"


@pytest.fixture
def location(db):
    """Coffee shop with a 5 minute dwell requirement."""
    return Location.objects.create(
        owner_id=BUSINESS,
        name="Kopi Corner",
        address="Jl. Braga 12",
        dwell_time_minutes=5,
    )


@pytest.fixture
def location_no_dwell(db):
    """Location without a configured dwell time (falls back to the default)."""
    return Location.objects.create(owner_id=BUSINESS, name="Roti Bakar 88")


@pytest.fixture
def other_location(db):
    """Second location of the same business."""
    return Location.objects.create(
        owner_id=BUSINESS,
        name="Kopi Corner Annex",
        dwell_time_minutes=10,
    )


@pytest.fixture
def foreign_location(db):
    """Location owned by another business."""
    return Location.objects.create(owner_id=OTHER_BUSINESS, name="Warung Sebelah", dwell_time_minutes=5)


@pytest.fixture
def campaign(db):
    """Business-wide campaign running now."""
    now = timezone.now()
    return Campaign.objects.create(
        owner_id=BUSINESS,
        name="Loyal Sipper",
        reward_description="Free Coffee",
        start_date=now - timedelta(days=1),
        end_date=now + timedelta(days=30),
    )


def backdate_attempt(customer_id, location, delta):
    """Move the pending attempt's start_time into the past."""
    return VouchAttempt.objects.filter(
        customer_id=customer_id,
        location=location,
        status=VouchAttempt.Status.PENDING,
    ).update(start_time=timezone.now() - delta)


@pytest.fixture
def completed_vouch(location):
    """Finished vouch for CUSTOMER at location (no campaign running)."""
    from vouchman.services.vouch import VouchService

    VouchService.start(CUSTOMER, location.pk)
    backdate_attempt(CUSTOMER, location, timedelta(minutes=6))
    return VouchService.stop(CUSTOMER, location.pk)


@pytest.fixture
def issued_reward(location, campaign):
    """Voucher issued to CUSTOMER by a completed vouch."""
    from vouchman.models import CustomerReward
    from vouchman.services.vouch import VouchService

    VouchService.start(CUSTOMER, location.pk)
    backdate_attempt(CUSTOMER, location, timedelta(minutes=6))
    result = VouchService.stop(CUSTOMER, location.pk)
    assert result.reward_issued
    return CustomerReward.objects.get(customer_id=CUSTOMER, campaign=campaign)
