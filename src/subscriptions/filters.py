from ninja import FilterSchema

from subscriptions.models import SubscriptionRequest


class SubscriptionRequestFilterSchema(FilterSchema):
    status: SubscriptionRequest.Status | None = None
