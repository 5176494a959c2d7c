"""Events schema package.

Schemas are split by area and re-exported here.
"""

from .event import (
    DraftSavedResponse,
    EventCommunitySchema,
    EventCreatedResponse,
    EventCreateSchema,
    EventDetailSchema,
    EventDraftSchema,
    EventInListSchema,
    EventUpdateSchema,
    OnlineMetadataEditSchema,
    OnlineMetadataSchema,
    OnsiteMetadataEditSchema,
    OnsiteMetadataSchema,
)
from .registration import (
    ParticipantActionResponse,
    ParticipantListSchema,
    ParticipantSchema,
    RegistrationCreatedResponse,
    RegistrationSchema,
    RegistrationStatusSchema,
)

__all__ = [
    "DraftSavedResponse",
    "EventCommunitySchema",
    "EventCreateSchema",
    "EventCreatedResponse",
    "EventDetailSchema",
    "EventDraftSchema",
    "EventInListSchema",
    "EventUpdateSchema",
    "OnlineMetadataEditSchema",
    "OnlineMetadataSchema",
    "OnsiteMetadataEditSchema",
    "OnsiteMetadataSchema",
    "ParticipantActionResponse",
    "ParticipantListSchema",
    "ParticipantSchema",
    "RegistrationCreatedResponse",
    "RegistrationSchema",
    "RegistrationStatusSchema",
]
