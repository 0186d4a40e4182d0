"""
Vouchman Gates - Validation rules.

V1: VoucherOwnership - Only the issuing business can redeem a voucher
V2: VoucherRedeemable - Voucher must still be active
V3: VoucherAuthenticity - Token is the service signature over the stored payload
V4: PopTokenProof - POP token belongs to the customer's vouch at the location
"""

import logging
from dataclasses import dataclass

from vouchman.exceptions import Conflict, Forbidden, InvalidState

logger = logging.getLogger(__name__)


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


# =============================================================================
# Gates
# =============================================================================


class Gates:
    """Vouchman validation gates."""

    # =========================================================================
    # V1: Voucher Ownership
    # =========================================================================

    @classmethod
    def voucher_ownership(cls, reward, business_id: str) -> GateResult:
        """
        V1: Voucher can only be redeemed by the business that issued it.

        Args:
            reward: CustomerReward being redeemed
            business_id: Verified id of the redeeming business

        Raises:
            Forbidden: If the voucher belongs to another business
        """
        if str(reward.business_id) != str(business_id):
            raise Forbidden("VOUCHER_WRONG_BUSINESS")

        return GateResult(True, "V1_VoucherOwnership")

    @classmethod
    def check_voucher_ownership(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.voucher_ownership(*args, **kwargs)
            return True
        except Forbidden:
            return False

    # =========================================================================
    # V2: Voucher Redeemable
    # =========================================================================

    @classmethod
    def voucher_redeemable(cls, reward) -> GateResult:
        """
        V2: Voucher status must be active.

        Raises:
            Conflict: If already redeemed (carries the original redemption)
            InvalidState: For any other non-active status
        """
        from vouchman.models import RewardStatus

        if reward.status == RewardStatus.REDEEMED:
            raise Conflict("VOUCHER_ALREADY_REDEEMED", reward=reward.redemption_info())

        if reward.status != RewardStatus.ACTIVE:
            raise InvalidState(
                "VOUCHER_NOT_ACTIVE",
                message=f"Voucher is not active (Status: {reward.status})",
                status=reward.status,
            )

        return GateResult(True, "V2_VoucherRedeemable")

    @classmethod
    def check_voucher_redeemable(cls, reward) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.voucher_redeemable(reward)
            return True
        except (Conflict, InvalidState):
            return False

    # =========================================================================
    # V3: Voucher Authenticity
    # =========================================================================

    @classmethod
    def voucher_authenticity(cls, reward, signer) -> GateResult:
        """
        V3: Token verifies against the stored payload, and the payload
        names the voucher's own customer and campaign.

        Args:
            reward: CustomerReward being redeemed
            signer: VoucherSigner holding the service key

        Raises:
            InvalidState: If the signature or payload binding is wrong
        """
        from vouchman.signing import VoucherPayload

        if not signer.verify(reward.signed_payload, reward.unique_token):
            logger.warning("V3: signature mismatch for voucher %s", reward.pk)
            raise InvalidState("VOUCHER_SIGNATURE_INVALID")

        try:
            payload = VoucherPayload.from_canonical(reward.signed_payload)
        except (ValueError, KeyError, TypeError):
            raise InvalidState("VOUCHER_SIGNATURE_INVALID")

        if payload.customer_id != str(reward.customer_id) or payload.campaign_id != str(reward.campaign_id):
            logger.warning("V3: payload does not match voucher %s", reward.pk)
            raise InvalidState("VOUCHER_SIGNATURE_INVALID")

        return GateResult(True, "V3_VoucherAuthenticity")

    @classmethod
    def check_voucher_authenticity(cls, reward, signer) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.voucher_authenticity(reward, signer)
            return True
        except InvalidState:
            return False

    # =========================================================================
    # V4: POP Token Proof
    # =========================================================================

    @classmethod
    def pop_token_proof(cls, customer_id: str, location_id, pop_token: str):
        """
        V4: POP token must match the customer's earn transaction at the location.

        Returns:
            The matching LoyaltyTransaction

        Raises:
            Forbidden: If no such vouch exists
        """
        from vouchman.models import LoyaltyTransaction, TransactionType
        from vouchman.utils import parse_uuid

        location_uuid = parse_uuid(location_id)
        if not isinstance(pop_token, str) or not pop_token.strip() or location_uuid is None:
            raise Forbidden("POP_TOKEN_INVALID")

        tx = LoyaltyTransaction.objects.filter(
            customer_id=customer_id,
            location_id=location_uuid,
            transaction_type=TransactionType.EARN,
            pop_token=pop_token.strip().upper(),
        ).first()

        if tx is None:
            raise Forbidden("POP_TOKEN_INVALID")

        return tx
