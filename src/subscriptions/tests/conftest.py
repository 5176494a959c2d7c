import pytest

from accounts.models import EventFlowUser
from subscriptions.models import SubscriptionRequest


@pytest.fixture
def pending_request(user: EventFlowUser) -> SubscriptionRequest:
    """A pending request for complimentary access by the standard user."""
    return SubscriptionRequest.objects.create(
        user=user,
        wikimedia_username="TestEditor",
        contribution_type=SubscriptionRequest.ContributionType.EDITOR,
        purpose_statement="I organize editathons in my city.",
    )
