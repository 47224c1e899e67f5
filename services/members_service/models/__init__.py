"""Members Service models package."""

from services.members_service.models.member import Donor, Member

__all__ = ["Donor", "Member"]
