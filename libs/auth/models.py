from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class AuthUser(BaseModel):
    """
    Represents an authenticated user from Supabase.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    role: str = "authenticated"
    app_metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("email", "phone", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        # Supabase sends "" for whichever identifier a user did not sign up with
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_admin(self) -> bool:
        return (
            self.role == "service_role"
            or self.app_metadata.get("role") == "admin"
        )
