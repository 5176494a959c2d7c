from uuid import UUID

from django.db.models import QuerySet
from django.utils.translation import gettext_lazy as _
from ninja import Query
from ninja_extra import api_controller, route, status
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_extra.searching import Searching, searching

from common.auth_base import AdminJWTAuth
from common.controllers import UserAwareController
from common.schema import ResponseMessage
from subscriptions import filters, schema
from subscriptions.models import PaymentTransaction, SubscriptionRequest
from subscriptions.service import subscription_service


@api_controller("/admin/subscriptions", auth=AdminJWTAuth(), tags=["Subscription Admin"])
class SubscriptionAdminController(UserAwareController):
    def get_queryset(self) -> QuerySet[SubscriptionRequest]:
        return SubscriptionRequest.objects.select_related("user").order_by("-submitted_at")

    @route.get(
        "/requests",
        url_name="list_subscription_requests",
        response=PaginatedResponseSchema[schema.SubscriptionRequestAdminSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    @searching(Searching, search_fields=["wikimedia_username", "user__email", "user__name", "purpose_statement"])
    def list_requests(
        self,
        params: filters.SubscriptionRequestFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[SubscriptionRequest]:
        """Subscription requests, newest first. Filter by `status` to build the review queue."""
        return params.filter(self.get_queryset())

    @route.get(
        "/requests/{request_id}",
        url_name="get_subscription_request",
        response=schema.SubscriptionRequestAdminSchema,
    )
    def get_request(self, request_id: UUID) -> SubscriptionRequest:
        return self.get_object_or_exception(  # type: ignore[no-any-return]
            self.get_queryset(), id=request_id, error_message=str(_("Request not found"))
        )

    @route.post(
        "/requests/{request_id}/review",
        url_name="review_subscription_request",
        response=ResponseMessage,
    )
    def review_request(self, request_id: UUID, payload: schema.SubscriptionRequestReviewSchema) -> ResponseMessage:
        """Approve or reject a pending request.

        Approving grants the applicant a complimentary subscription and upgrades them to premium.
        """
        reviewed = subscription_service.review_request(request_id, self.user(), payload)
        return ResponseMessage(message=str(_("Request {status} successfully")).format(status=reviewed.status))

    @route.post(
        "/payments",
        url_name="record_payment",
        response={201: schema.PaymentTransactionSchema},
    )
    def record_payment(self, payload: schema.PaymentRecordSchema) -> tuple[int, PaymentTransaction]:
        """Record a payment confirmed by a payment gateway.

        A successful payment activates or extends the user's paid subscription.
        """
        return status.HTTP_201_CREATED, subscription_service.record_payment(payload)
