from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from aayutrace.core.database import get_db
from aayutrace.core.dependencies import get_current_user
from aayutrace.models.user import User
from aayutrace.schemas.family import (
    FamilyCreate,
    FamilyResponse,
    InvitationCreate,
    InvitationSentResponse,
    InvitationPreviewResponse,
    JoinFamilyRequest,
)
from aayutrace.services.family_service import FamilyService

router = APIRouter(prefix="/families", tags=["Families"])


@router.post("", response_model=FamilyResponse, status_code=status.HTTP_201_CREATED)
def create_family(
    request: FamilyCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Crée une famille ; le créateur en devient owner"""
    service = FamilyService(db)
    service.create_family(current_user, request.name)
    return service.get_overview(current_user)


@router.get("/me", response_model=FamilyResponse)
def get_my_family(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return FamilyService(db).get_overview(current_user)


@router.post(
    "/me/invitations",
    response_model=InvitationSentResponse,
    status_code=status.HTTP_201_CREATED,
)
def invite_member(
    request: InvitationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Invite un membre par email

    L'échec d'envoi de l'email est signalé (`email_sent: false`) mais
    l'invitation reste valide.
    """
    return FamilyService(db).invite(current_user, request.email)


@router.get("/invitations/{token}", response_model=InvitationPreviewResponse)
def preview_invitation(token: str, db: Session = Depends(get_db)):
    return FamilyService(db).preview_invitation(token)


@router.post("/join", response_model=FamilyResponse)
def join_family(
    request: JoinFamilyRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    service = FamilyService(db)
    service.join(current_user, request.token)
    return service.get_overview(current_user)


@router.delete("/me/members/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    member_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    FamilyService(db).remove_member(current_user, member_id)
    return None


@router.post("/me/leave", status_code=status.HTTP_204_NO_CONTENT)
def leave_family(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    FamilyService(db).leave(current_user)
    return None
