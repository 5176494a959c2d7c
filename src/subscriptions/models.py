import typing as t
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxLengthValidator, MinLengthValidator, MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from common.models import TimeStampedModel


class SubscriptionQuerySet(models.QuerySet["Subscription"]):
    def active(self) -> t.Self:
        """Active subscriptions that have not reached their end date."""
        return self.filter(status=Subscription.Status.ACTIVE).filter(
            Q(end_date__isnull=True) | Q(end_date__gte=timezone.now())
        )


class Subscription(TimeStampedModel):
    """A paid or complimentary premium subscription."""

    class PlanType(models.TextChoices):
        MONTHLY = "monthly", "Monthly"
        ANNUAL = "annual", "Annual"
        WIKIMEDIA_COMPLIMENTARY = "wikimedia_complimentary", "Wikimedia complimentary"

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        EXPIRED = "expired", "Expired"
        CANCELLED = "cancelled", "Cancelled"
        PAYMENT_FAILED = "payment_failed", "Payment failed"
        PENDING = "pending", "Pending"

    class PaymentGateway(models.TextChoices):
        RAZORPAY = "razorpay", "Razorpay"
        STRIPE = "stripe", "Stripe"
        ADMIN_GRANT = "admin_grant", "Admin grant"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="subscriptions")
    plan_type = models.CharField(max_length=50, choices=PlanType.choices)
    status = models.CharField(max_length=50, choices=Status.choices, default=Status.PENDING, db_index=True)
    payment_gateway = models.CharField(max_length=50, choices=PaymentGateway.choices, blank=True)
    start_date = models.DateTimeField(default=timezone.now)
    end_date = models.DateTimeField(null=True, blank=True)
    amount_paid = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    currency = models.CharField(max_length=3, blank=True)
    transaction_id = models.CharField(max_length=255, blank=True)
    auto_renew = models.BooleanField(default=True)

    objects = SubscriptionQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.user} - {self.plan_type} ({self.status})"

    @property
    def is_active(self) -> bool:
        """Whether the subscription currently grants premium access."""
        if self.status != self.Status.ACTIVE:
            return False
        return self.end_date is None or self.end_date >= timezone.now()

    @property
    def is_complimentary(self) -> bool:
        return self.plan_type == self.PlanType.WIKIMEDIA_COMPLIMENTARY


class SubscriptionRequest(TimeStampedModel):
    """Request from a Wikimedia contributor for complimentary premium access."""

    class ContributionType(models.TextChoices):
        EDITOR = "editor", "Editor"
        ADMINISTRATOR = "administrator", "Administrator"
        BUREAUCRAT = "bureaucrat", "Bureaucrat"
        ORGANIZER = "organizer", "Organizer"
        DEVELOPER = "developer", "Developer"
        OTHER = "other", "Other"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="subscription_requests"
    )
    wikimedia_username = models.CharField(max_length=255, blank=True)
    wikimedia_profile_url = models.URLField(max_length=500, blank=True)
    years_active = models.PositiveIntegerField(null=True, blank=True)
    contribution_type = models.CharField(max_length=50, choices=ContributionType.choices)
    purpose_statement = models.TextField(validators=[MinLengthValidator(10), MaxLengthValidator(500)])
    edit_count = models.PositiveIntegerField(null=True, blank=True)
    contributions_url = models.URLField(max_length=500, blank=True)
    notable_projects = models.TextField(blank=True, validators=[MaxLengthValidator(300)])
    alternative_email = models.EmailField(blank=True)
    phone_number = models.CharField(max_length=20, blank=True)

    status = models.CharField(max_length=50, choices=Status.choices, default=Status.PENDING, db_index=True)
    submitted_at = models.DateTimeField(default=timezone.now, db_index=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_subscription_requests",
    )
    admin_notes = models.TextField(blank=True)

    class Meta:
        ordering = ["-submitted_at"]

    def __str__(self) -> str:
        return f"Subscription request by {self.user} ({self.status})"


class PaymentTransaction(TimeStampedModel):
    """A payment reported by a payment gateway."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        SUCCESS = "success", "Success"
        FAILED = "failed", "Failed"
        REFUNDED = "refunded", "Refunded"

    subscription = models.ForeignKey(
        Subscription, on_delete=models.SET_NULL, null=True, blank=True, related_name="payments"
    )
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="payments")
    gateway_transaction_id = models.CharField(max_length=255, blank=True, db_index=True)
    payment_gateway = models.CharField(max_length=50, choices=Subscription.PaymentGateway.choices)
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal("0"))])
    currency = models.CharField(max_length=3)
    status = models.CharField(max_length=50, choices=Status.choices, default=Status.PENDING, db_index=True)
    payment_method = models.CharField(max_length=50, blank=True)
    gateway_response = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.payment_gateway}:{self.gateway_transaction_id or self.id} ({self.status})"
