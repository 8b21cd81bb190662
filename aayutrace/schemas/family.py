from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime


class FamilyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Family name cannot be blank")
        return v.strip()


class InvitationCreate(BaseModel):
    email: EmailStr


class JoinFamilyRequest(BaseModel):
    token: str = Field(..., min_length=8)


class FamilyMemberResponse(BaseModel):
    id: int
    user_id: int
    role: str
    joined_at: datetime
    full_name: Optional[str] = None
    email: Optional[str] = None


class InvitationResponse(BaseModel):
    id: int
    family_id: int
    email: str
    token: str
    expires_at: datetime
    used_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class InvitationSentResponse(BaseModel):
    invitation: InvitationResponse
    invitation_url: str
    email_sent: bool
    warnings: List[str] = []


class InvitationPreviewResponse(BaseModel):
    family_id: int
    family_name: str
    email: str
    invited_by: Optional[str]
    expires_at: datetime


class FamilyResponse(BaseModel):
    id: int
    name: str
    created_by: int
    created_at: datetime
    role: str
    members: List[FamilyMemberResponse] = []
    pending_invitations: List[InvitationResponse] = []
