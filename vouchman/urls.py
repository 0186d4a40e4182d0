from django.urls import path

from .views import (
    IssuedRewardsView,
    LocationReviewsView,
    MyRewardsView,
    RedeemView,
    ReviewsView,
    VouchStartView,
    VouchStatusView,
    VouchStopView,
)

app_name = "vouchman"

urlpatterns = [
    path("vouch/start/", VouchStartView.as_view(), name="vouch-start"),
    path("vouch/stop/", VouchStopView.as_view(), name="vouch-stop"),
    path("vouch/status/<str:location_id>/", VouchStatusView.as_view(), name="vouch-status"),
    path("rewards/redeem/", RedeemView.as_view(), name="reward-redeem"),
    path("rewards/mine/", MyRewardsView.as_view(), name="my-rewards"),
    path("rewards/issued/", IssuedRewardsView.as_view(), name="issued-rewards"),
    path("reviews/", ReviewsView.as_view(), name="reviews"),
    path("public/reviews/<str:location_id>/", LocationReviewsView.as_view(), name="location-reviews"),
]
