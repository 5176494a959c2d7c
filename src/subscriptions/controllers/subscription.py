from django.utils.translation import gettext_lazy as _
from ninja_extra import api_controller, route, status

from common.authentication import EventFlowJWTAuth
from common.controllers import UserAwareController
from common.throttling import SubscriptionRequestThrottle
from subscriptions import schema
from subscriptions.service import subscription_service


@api_controller("/subscriptions", auth=EventFlowJWTAuth(), tags=["Subscriptions"])
class SubscriptionController(UserAwareController):
    @route.post(
        "/request",
        url_name="create_subscription_request",
        response={201: schema.SubscriptionRequestCreatedResponse},
        throttle=SubscriptionRequestThrottle(),
    )
    def create_request(
        self, payload: schema.SubscriptionRequestCreateSchema
    ) -> tuple[int, schema.SubscriptionRequestCreatedResponse]:
        """Ask for complimentary premium access as a Wikimedia contributor.

        A platform admin reviews the request. Fails if the user already has an active subscription or
        a pending request.
        """
        request = subscription_service.create_request(self.user(), payload)
        return status.HTTP_201_CREATED, schema.SubscriptionRequestCreatedResponse(
            request_id=request.id,
            message=str(_("Subscription request submitted successfully. Review typically takes 48-72 hours.")),
        )

    @route.get("/request", url_name="my_subscription_request", response=schema.MySubscriptionRequestSchema)
    def my_request(self) -> schema.MySubscriptionRequestSchema:
        """The caller's most recent subscription request."""
        request = subscription_service.get_latest_request(self.user())
        return schema.MySubscriptionRequestSchema(
            has_request=request is not None,
            request=schema.SubscriptionRequestSchema.from_orm(request) if request else None,
        )

    @route.get("/me", url_name="my_subscription", response=schema.MySubscriptionSchema)
    def my_subscription(self) -> schema.MySubscriptionSchema:
        """The caller's subscription, and whether premium access is obtained by request or payment."""
        return subscription_service.get_my_subscription(self.user())

    @route.get("/check", url_name="check_subscription", response=schema.SubscriptionCheckSchema)
    def check(self) -> schema.SubscriptionCheckSchema:
        return schema.SubscriptionCheckSchema(
            has_active_subscription=subscription_service.has_active_subscription(self.user())
        )

    @route.post("/cancel", url_name="cancel_subscription", response=schema.SubscriptionCancelResponse)
    def cancel(self) -> schema.SubscriptionCancelResponse:
        """Stop auto-renewal. Access continues until the end of the current period."""
        subscription = subscription_service.cancel_subscription(self.user())
        return schema.SubscriptionCancelResponse(
            message=str(_("Subscription cancelled. You'll retain access until the end of your billing period.")),
            end_date=subscription.end_date,
        )
