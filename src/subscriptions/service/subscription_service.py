"""Premium subscriptions: requests, reviews, payments and cancellation."""

from datetime import timedelta
from uuid import UUID

import structlog
from django.conf import settings
from django.db import transaction
from django.db.models import F, QuerySet
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from ninja.errors import HttpError

from accounts.models import EventFlowUser
from subscriptions import schema
from subscriptions.models import PaymentTransaction, Subscription, SubscriptionRequest

logger = structlog.get_logger(__name__)

COMPLIMENTARY_DURATION = timedelta(days=365 * 100)
PLAN_DURATIONS = {
    Subscription.PlanType.MONTHLY: timedelta(days=30),
    Subscription.PlanType.ANNUAL: timedelta(days=365),
}


def _longest_running_first(queryset: QuerySet[Subscription]) -> QuerySet[Subscription]:
    return queryset.order_by(F("end_date").desc(nulls_first=True), "-created_at")


def _running_paid_subscriptions(user: EventFlowUser) -> QuerySet[Subscription]:
    active = Subscription.objects.active().filter(user=user)
    return _longest_running_first(active.exclude(plan_type=Subscription.PlanType.WIKIMEDIA_COMPLIMENTARY))


def get_user_subscription(user: EventFlowUser) -> Subscription | None:
    """The active subscription that runs longest, else the user's most recent one."""
    active = _longest_running_first(Subscription.objects.active().filter(user=user)).first()
    return active or Subscription.objects.filter(user=user).order_by("-created_at").first()


def has_active_subscription(user: EventFlowUser) -> bool:
    """Whether any of the user's subscriptions currently grants premium access."""
    return Subscription.objects.active().filter(user=user).exists()


def get_gate_type(user: EventFlowUser) -> str:
    """How the user obtains premium access: by request (Wikimedia contributors) or by payment."""
    if settings.IS_MEDIA_WIKI or user.mediawiki_username:
        return "request"
    return "payment"


def get_my_subscription(user: EventFlowUser) -> schema.MySubscriptionSchema:
    subscription = get_user_subscription(user)
    return schema.MySubscriptionSchema(
        has_subscription=subscription is not None,
        subscription=schema.SubscriptionSchema.from_orm(subscription) if subscription else None,
        user_type=user.user_type,
        gate_type=get_gate_type(user),  # type: ignore[arg-type]
    )


def get_latest_request(user: EventFlowUser) -> SubscriptionRequest | None:
    return SubscriptionRequest.objects.filter(user=user).order_by("-submitted_at").first()


@transaction.atomic
def create_request(user: EventFlowUser, payload: schema.SubscriptionRequestCreateSchema) -> SubscriptionRequest:
    """Submit a request for complimentary premium access.

    The request is always created as pending; only a platform admin can approve it.
    """
    if has_active_subscription(user):
        raise HttpError(400, str(_("You already have an active subscription")))
    if SubscriptionRequest.objects.filter(user=user, status=SubscriptionRequest.Status.PENDING).exists():
        raise HttpError(400, str(_("You already have a pending subscription request")))
    if not settings.IS_MEDIA_WIKI and not payload.wikimedia_username:
        raise HttpError(400, str(_("Wikimedia username is required")))

    request = SubscriptionRequest.objects.create(
        user=user,
        wikimedia_username=payload.wikimedia_username or "",
        wikimedia_profile_url=str(payload.wikimedia_profile_url) if payload.wikimedia_profile_url else "",
        years_active=payload.years_active,
        contribution_type=payload.contribution_type,
        purpose_statement=payload.purpose_statement,
        edit_count=payload.edit_count,
        contributions_url=str(payload.contributions_url) if payload.contributions_url else "",
        notable_projects=payload.notable_projects or "",
        alternative_email=payload.alternative_email or "",
        phone_number=payload.phone_number or "",
        status=SubscriptionRequest.Status.PENDING,
    )
    logger.info("subscription_request_created", request_id=str(request.id), user_id=str(user.id))
    return request


@transaction.atomic
def cancel_subscription(user: EventFlowUser) -> Subscription:
    """Turn off auto-renewal. Access is kept until the end of the billing period."""
    subscription = _running_paid_subscriptions(user).first() or get_user_subscription(user)
    if subscription is None:
        raise HttpError(404, str(_("No active subscription found")))
    if subscription.is_complimentary:
        raise HttpError(400, str(_("Complimentary subscriptions cannot be cancelled")))
    if not subscription.auto_renew:
        raise HttpError(400, str(_("Subscription is already set to not renew")))

    subscription.auto_renew = False
    subscription.save(update_fields=["auto_renew", "updated_at"])
    logger.info("subscription_auto_renew_disabled", subscription_id=str(subscription.id), user_id=str(user.id))
    return subscription


def _mark_premium(user: EventFlowUser) -> None:
    if user.user_type == EventFlowUser.UserType.REGISTERED_USER:
        user.user_type = EventFlowUser.UserType.PREMIUM_SUBSCRIBER
        user.save(update_fields=["user_type"])


@transaction.atomic
def review_request(
    request_id: UUID, reviewer: EventFlowUser, payload: schema.SubscriptionRequestReviewSchema
) -> SubscriptionRequest:
    """Approve or reject a pending request.

    Approval grants a complimentary subscription that never needs renewing.
    """
    subscription_request = (
        SubscriptionRequest.objects.select_for_update().select_related("user").filter(pk=request_id).first()
    )
    if subscription_request is None:
        raise HttpError(404, str(_("Request not found")))
    if subscription_request.status != SubscriptionRequest.Status.PENDING:
        raise HttpError(400, str(_("Request has already been reviewed")))

    approved = payload.action == "approve"
    subscription_request.status = (
        SubscriptionRequest.Status.APPROVED if approved else SubscriptionRequest.Status.REJECTED
    )
    subscription_request.reviewed_at = timezone.now()
    subscription_request.reviewed_by = reviewer
    subscription_request.admin_notes = payload.admin_notes or ""
    subscription_request.save()

    if approved:
        now = timezone.now()
        Subscription.objects.create(
            user=subscription_request.user,
            plan_type=Subscription.PlanType.WIKIMEDIA_COMPLIMENTARY,
            status=Subscription.Status.ACTIVE,
            payment_gateway=Subscription.PaymentGateway.ADMIN_GRANT,
            start_date=now,
            end_date=now + COMPLIMENTARY_DURATION,
            amount_paid=0,
            auto_renew=False,
        )
        _mark_premium(subscription_request.user)

    logger.info(
        "subscription_request_reviewed",
        request_id=str(subscription_request.id),
        action=payload.action,
        reviewer_id=str(reviewer.id),
    )
    return subscription_request


@transaction.atomic
def record_payment(payload: schema.PaymentRecordSchema) -> PaymentTransaction:
    """Store a payment reported by a gateway.

    A successful payment activates the user's paid subscription, or extends it when it is still running.
    """
    user = EventFlowUser.objects.filter(pk=payload.user_id).first()
    if user is None:
        raise HttpError(404, str(_("User not found")))

    subscription: Subscription | None = None
    if payload.status == PaymentTransaction.Status.SUCCESS:
        subscription = _activate_paid_subscription(user, payload)

    transaction_record = PaymentTransaction.objects.create(
        subscription=subscription,
        user=user,
        gateway_transaction_id=payload.gateway_transaction_id,
        payment_gateway=payload.payment_gateway,
        amount=payload.amount,
        currency=payload.currency.upper(),
        status=payload.status,
        payment_method=payload.payment_method,
        gateway_response=payload.gateway_response,
    )
    logger.info(
        "payment_recorded",
        transaction_id=str(transaction_record.id),
        user_id=str(user.id),
        status=payload.status,
        subscription_id=str(subscription.id) if subscription else None,
    )
    return transaction_record


def _activate_paid_subscription(user: EventFlowUser, payload: schema.PaymentRecordSchema) -> Subscription:
    duration = PLAN_DURATIONS[Subscription.PlanType(payload.plan_type)]
    now = timezone.now()
    current = _running_paid_subscriptions(user).select_for_update().first()

    # A running paid subscription is extended from its end date, switching plan if needed.
    if current is not None and current.end_date is not None:
        current.end_date = max(current.end_date, now) + duration
        current.plan_type = payload.plan_type
        current.amount_paid = (current.amount_paid or 0) + payload.amount
        current.transaction_id = payload.gateway_transaction_id
        current.auto_renew = True
        current.save()
        subscription = current
    else:
        subscription = Subscription.objects.create(
            user=user,
            plan_type=payload.plan_type,
            status=Subscription.Status.ACTIVE,
            payment_gateway=payload.payment_gateway,
            start_date=now,
            end_date=now + duration,
            amount_paid=payload.amount,
            currency=payload.currency.upper(),
            transaction_id=payload.gateway_transaction_id,
            auto_renew=True,
        )
    _mark_premium(user)
    return subscription
