"""
Django Vouchman - Proof-of-presence loyalty vouchers.

Usage:
    from vouchman import VouchService, RedemptionService

    VouchService.start("user-123", location_id)
    result = VouchService.stop("user-123", location_id)
    status = VouchService.status("user-123", location_id)

    reward = RedemptionService.redeem(unique_token, business_id)
"""


def __getattr__(name):
    if name == "VouchService":
        from vouchman.services.vouch import VouchService

        return VouchService
    if name == "CampaignService":
        from vouchman.services.campaign import CampaignService

        return CampaignService
    if name == "RedemptionService":
        from vouchman.services.redemption import RedemptionService

        return RedemptionService
    if name == "VouchmanError":
        from vouchman.exceptions import VouchmanError

        return VouchmanError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["VouchService", "CampaignService", "RedemptionService", "VouchmanError"]
__version__ = "0.1.0"
