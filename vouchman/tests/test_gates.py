"""Gate tests: non-raising variants and the POP proof."""

from unittest.mock import MagicMock

import pytest

from vouchman.exceptions import Forbidden
from vouchman.gates import GateResult, Gates
from vouchman.models import CustomerReward, RewardStatus
from vouchman.signing import get_voucher_signer
from vouchman.tests.conftest import BUSINESS, CUSTOMER, OTHER_BUSINESS

pytestmark = pytest.mark.django_db


class TestV1VoucherOwnership:
    def test_passes_for_issuer(self, issued_reward):
        result = Gates.voucher_ownership(issued_reward, BUSINESS)
        assert isinstance(result, GateResult)
        assert result.passed

    def test_check_variant(self, issued_reward):
        assert Gates.check_voucher_ownership(issued_reward, BUSINESS)
        assert not Gates.check_voucher_ownership(issued_reward, OTHER_BUSINESS)


class TestV2VoucherRedeemable:
    def test_check_variant(self, issued_reward):
        assert Gates.check_voucher_redeemable(issued_reward)

        issued_reward.status = RewardStatus.VOID
        assert not Gates.check_voucher_redeemable(issued_reward)

    def test_redeemed_is_not_redeemable(self, issued_reward):
        CustomerReward.objects.filter(pk=issued_reward.pk).update(status=RewardStatus.REDEEMED, redeemed_at=issued_reward.created_at)
        issued_reward.refresh_from_db()
        assert not Gates.check_voucher_redeemable(issued_reward)


class TestV3VoucherAuthenticity:
    def test_genuine(self, issued_reward):
        assert Gates.check_voucher_authenticity(issued_reward, get_voucher_signer())

    def test_rejects_when_signature_fails(self, issued_reward):
        signer = MagicMock()
        signer.verify.return_value = False
        assert not Gates.check_voucher_authenticity(issued_reward, signer)

    def test_rejects_unparseable_payload(self, issued_reward):
        signer = MagicMock()
        signer.verify.return_value = True
        issued_reward.signed_payload = "[]"
        assert not Gates.check_voucher_authenticity(issued_reward, signer)


class TestV4PopTokenProof:
    def test_returns_transaction(self, location, completed_vouch):
        tx = Gates.pop_token_proof(CUSTOMER, location.pk, completed_vouch.pop_token)
        assert tx.pop_token == completed_vouch.pop_token

    def test_rejects_malformed_location(self, completed_vouch):
        with pytest.raises(Forbidden):
            Gates.pop_token_proof(CUSTOMER, "not-a-uuid", completed_vouch.pop_token)

    @pytest.mark.parametrize("pop_token", [1234, None, ["AB12CD34"], "   "])
    def test_rejects_non_string_or_blank_token(self, location, completed_vouch, pop_token):
        with pytest.raises(Forbidden) as exc:
            Gates.pop_token_proof(CUSTOMER, location.pk, pop_token)
        assert exc.value.code == "POP_TOKEN_INVALID"
