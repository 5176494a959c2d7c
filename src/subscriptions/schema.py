import datetime
import typing as t
from decimal import Decimal
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import EmailStr, Field, HttpUrl

from accounts.schema import ContactUserSchema
from common.schema import StrippedString

from .models import PaymentTransaction, Subscription, SubscriptionRequest


class SubscriptionSchema(ModelSchema):
    is_active: bool

    class Meta:
        model = Subscription
        fields = [
            "id",
            "plan_type",
            "status",
            "payment_gateway",
            "start_date",
            "end_date",
            "amount_paid",
            "currency",
            "auto_renew",
            "created_at",
        ]


class MySubscriptionSchema(Schema):
    has_subscription: bool
    subscription: SubscriptionSchema | None = None
    user_type: str
    gate_type: t.Literal["request", "payment"]


class SubscriptionCheckSchema(Schema):
    has_active_subscription: bool


class SubscriptionRequestCreateSchema(Schema):
    wikimedia_username: StrippedString | None = Field(None, max_length=255)
    wikimedia_profile_url: HttpUrl | None = None
    years_active: int | None = Field(None, gt=0)
    contribution_type: SubscriptionRequest.ContributionType
    purpose_statement: StrippedString = Field(..., min_length=10, max_length=500)
    edit_count: int | None = Field(None, ge=0)
    contributions_url: HttpUrl | None = None
    notable_projects: StrippedString | None = Field(None, max_length=300)
    alternative_email: EmailStr | None = None
    phone_number: StrippedString | None = Field(None, max_length=20)


class SubscriptionRequestSchema(ModelSchema):
    class Meta:
        model = SubscriptionRequest
        fields = [
            "id",
            "wikimedia_username",
            "wikimedia_profile_url",
            "years_active",
            "contribution_type",
            "purpose_statement",
            "edit_count",
            "contributions_url",
            "notable_projects",
            "alternative_email",
            "phone_number",
            "status",
            "submitted_at",
            "reviewed_at",
            "admin_notes",
        ]


class SubscriptionRequestAdminSchema(SubscriptionRequestSchema):
    user: ContactUserSchema
    reviewed_by_id: UUID | None = None


class SubscriptionRequestCreatedResponse(Schema):
    success: bool = True
    request_id: UUID
    message: str


class MySubscriptionRequestSchema(Schema):
    has_request: bool
    request: SubscriptionRequestSchema | None = None


class SubscriptionRequestReviewSchema(Schema):
    action: t.Literal["approve", "reject"]
    admin_notes: StrippedString | None = None


class PaymentRecordSchema(Schema):
    user_id: UUID
    plan_type: t.Literal["monthly", "annual"]
    payment_gateway: t.Literal["razorpay", "stripe"]
    gateway_transaction_id: StrippedString = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    currency: StrippedString = Field(..., min_length=3, max_length=3)
    status: PaymentTransaction.Status = PaymentTransaction.Status.SUCCESS
    payment_method: StrippedString = Field("", max_length=50)
    gateway_response: dict[str, t.Any] = Field(default_factory=dict)


class PaymentTransactionSchema(ModelSchema):
    subscription_id: UUID | None = None

    class Meta:
        model = PaymentTransaction
        fields = [
            "id",
            "gateway_transaction_id",
            "payment_gateway",
            "amount",
            "currency",
            "status",
            "payment_method",
            "created_at",
        ]


class SubscriptionCancelResponse(Schema):
    success: bool = True
    message: str
    end_date: datetime.datetime | None = None
