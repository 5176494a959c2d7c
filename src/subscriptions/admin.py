"""Admin interface for subscriptions app."""

from django import forms
from django.contrib import admin, messages
from django.db.models import QuerySet
from django.http import HttpRequest

from subscriptions import schema
from subscriptions.models import PaymentTransaction, Subscription, SubscriptionRequest
from subscriptions.service import subscription_service


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["user", "plan_type", "status", "payment_gateway", "start_date", "end_date", "auto_renew"]
    list_filter = ["plan_type", "status", "payment_gateway", "auto_renew"]
    search_fields = ["user__username", "user__email", "transaction_id"]
    autocomplete_fields = ["user"]
    readonly_fields = ["id", "created_at", "updated_at"]
    date_hierarchy = "start_date"


@admin.register(SubscriptionRequest)
class SubscriptionRequestAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ["user", "wikimedia_username", "contribution_type", "status", "submitted_at", "reviewed_by"]
    list_filter = ["status", "contribution_type"]
    search_fields = ["user__username", "user__email", "wikimedia_username"]
    readonly_fields = ["id", "user", "submitted_at", "reviewed_at", "reviewed_by", "created_at", "updated_at"]
    actions = ["approve_requests", "reject_requests"]

    def _review(self, request: HttpRequest, queryset: QuerySet[SubscriptionRequest], action: str) -> None:
        pending = list(queryset.filter(status=SubscriptionRequest.Status.PENDING))
        for subscription_request in pending:
            subscription_service.review_request(
                subscription_request.id,
                request.user,  # type: ignore[arg-type]
                schema.SubscriptionRequestReviewSchema(action=action),  # type: ignore[arg-type]
            )
        self.message_user(request, f"{len(pending)} request(s) reviewed.", messages.SUCCESS)

    @admin.action(description="Approve selected pending requests")
    def approve_requests(self, request: HttpRequest, queryset: QuerySet[SubscriptionRequest]) -> None:
        self._review(request, queryset, "approve")

    @admin.action(description="Reject selected pending requests")
    def reject_requests(self, request: HttpRequest, queryset: QuerySet[SubscriptionRequest]) -> None:
        self._review(request, queryset, "reject")


class PaymentTransactionForm(forms.ModelForm):  # type: ignore[type-arg]
    payment_gateway = forms.ChoiceField(
        choices=[
            (Subscription.PaymentGateway.RAZORPAY.value, Subscription.PaymentGateway.RAZORPAY.label),
            (Subscription.PaymentGateway.STRIPE.value, Subscription.PaymentGateway.STRIPE.label),
        ]
    )
    plan_type = forms.ChoiceField(
        choices=[
            (Subscription.PlanType.MONTHLY.value, Subscription.PlanType.MONTHLY.label),
            (Subscription.PlanType.ANNUAL.value, Subscription.PlanType.ANNUAL.label),
        ],
        required=False,
        help_text="Plan activated or extended by a successful payment.",
    )

    class Meta:
        model = PaymentTransaction
        fields = "__all__"


@admin.register(PaymentTransaction)
class PaymentTransactionAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    form = PaymentTransactionForm
    list_display = ["gateway_transaction_id", "user", "payment_gateway", "amount", "currency", "status", "created_at"]
    list_filter = ["payment_gateway", "status", "currency"]
    search_fields = ["gateway_transaction_id", "user__username", "user__email"]
    readonly_fields = ["id", "gateway_response", "created_at", "updated_at"]
    autocomplete_fields = ["user", "subscription"]

    def save_model(
        self,
        request: HttpRequest,
        obj: PaymentTransaction,
        form: forms.ModelForm,  # type: ignore[type-arg]
        change: bool,
    ) -> None:
        """New payments go through the payment service so that subscriptions are activated."""
        if change:
            super().save_model(request, obj, form, change)
            return
        recorded = subscription_service.record_payment(
            schema.PaymentRecordSchema(
                user_id=obj.user_id,
                plan_type=form.cleaned_data.get("plan_type") or Subscription.PlanType.MONTHLY,
                payment_gateway=obj.payment_gateway,
                gateway_transaction_id=obj.gateway_transaction_id or str(obj.id),
                amount=obj.amount,
                currency=obj.currency,
                status=obj.status,
                payment_method=obj.payment_method,
                gateway_response=obj.gateway_response or {},
            )
        )
        obj.id = recorded.id
        obj.subscription_id = recorded.subscription_id
        obj._state.adding = False
