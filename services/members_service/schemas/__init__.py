"""Members Service schemas package."""

from services.members_service.schemas.member import (
    MemberResponse,
    MemberSearchResult,
    PhoneLookupPerson,
    PhoneLookupRequest,
    PhoneLookupResponse,
)

__all__ = [
    "MemberResponse",
    "MemberSearchResult",
    "PhoneLookupPerson",
    "PhoneLookupRequest",
    "PhoneLookupResponse",
]
