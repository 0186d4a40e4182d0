"""Vouchman services.

Lifecycle, leaf-first:
- vouchman.services.vouch: VouchService (start / stop / status)
- vouchman.services.minter: POP token and earn transaction
- vouchman.services.campaign: CampaignService (eligibility + voucher issuance)
- vouchman.services.redemption: RedemptionService

Read side:
- vouchman.services.rewards: RewardService (wallet listings)
- vouchman.services.review: ReviewService (POP-verified reviews)
"""
