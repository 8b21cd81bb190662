from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from aayutrace.core.database import get_db
from aayutrace.core.dependencies import get_current_user
from aayutrace.models.user import User
from aayutrace.schemas.user import UserResponse, UserUpdateRequest, PasswordChangeRequest
from aayutrace.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
def get_current_user_profile(current_user: User = Depends(get_current_user)):
    """Profil de l'utilisateur connecté"""
    return current_user


@router.put("/me", response_model=UserResponse)
def update_profile(
    request: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return UserService(db).update_user(current_user.id, request)


@router.put("/me/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    request: PasswordChangeRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not UserService(db).update_password(
        current_user.id, request.old_password, request.new_password
    ):
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    return None


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Supprime le compte et toutes ses données"""
    UserService(db).delete_user(current_user.id)
    return None
