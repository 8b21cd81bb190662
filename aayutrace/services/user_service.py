from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional
import logging

from aayutrace.middleware.transaction_handler import transactional
from aayutrace.models.user import User
from aayutrace.core.config import settings
from aayutrace.core.security import (
    get_password_hash,
    verify_password,
    create_password_reset_token,
    decode_token,
)
from aayutrace.schemas.user import UserUpdateRequest
from aayutrace.services.email_service import EmailService

logger = logging.getLogger(__name__)


class UserService:
    """Service de gestion des utilisateurs"""

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def authenticate(self, email: str, password: str) -> Optional[User]:
        user = self.get_user_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"Failed login attempt for {email}")
            return None
        return user

    def create_user(
        self, email: str, password: str, full_name: Optional[str] = None
    ) -> Optional[User]:
        """
        Crée un nouvel utilisateur

        Returns:
            User créé ou None si l'email existe déjà
        """
        user = User(
            email=email.lower(),
            full_name=full_name,
            password_hash=get_password_hash(password),
        )
        self.db.add(user)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"User creation failed: email {email} already exists")
            return None

        self.db.refresh(user)
        logger.info(f"User created: {user.id} - {user.email}")

        EmailService().send_welcome_email(user.email, user.full_name)
        return user

    @transactional
    def update_user(self, user_id: int, update_data: UserUpdateRequest) -> Optional[User]:
        user = self.get_user_by_id(user_id)

        if not user:
            return None

        if update_data.full_name is not None:
            user.full_name = update_data.full_name

        if update_data.avatar_url is not None:
            user.avatar_url = update_data.avatar_url

        logger.info(f"User updated: {user.id}")
        return user

    @transactional
    def update_password(self, user_id: int, old_password: str, new_password: str) -> bool:
        """
        Change le mot de passe d'un utilisateur

        Returns:
            True si le mot de passe a été changé, False sinon
        """
        user = self.get_user_by_id(user_id)

        if not user:
            return False

        if not verify_password(old_password, user.password_hash):
            logger.warning(
                f"Password update failed for user {user_id}: incorrect old password"
            )
            return False

        user.password_hash = get_password_hash(new_password)
        logger.info(f"Password updated for user {user_id}")
        return True

    def request_password_reset(self, email: str) -> bool:
        """
        Envoie un lien de réinitialisation si le compte existe

        Ne révèle jamais si l'email est inconnu : l'appelant répond
        toujours la même chose.
        """
        user = self.get_user_by_email(email)
        if not user:
            logger.info(f"Password reset requested for unknown email {email}")
            return False

        token = create_password_reset_token({"sub": str(user.id)})
        reset_url = f"{settings.FRONTEND_URL}/reset-password?token={token}"
        return EmailService().send_password_reset_email(user.email, reset_url)

    @transactional
    def reset_password(self, token: str, new_password: str) -> bool:
        payload = decode_token(token)

        if payload.get("type") != "reset" or not payload.get("sub"):
            logger.warning("Password reset attempted with a non-reset token")
            return False

        user = self.get_user_by_id(int(payload["sub"]))
        if not user:
            return False

        user.password_hash = get_password_hash(new_password)
        logger.info(f"Password reset for user {user.id}")
        return True

    @transactional
    def delete_user(self, user_id: int) -> bool:
        """
        Supprime un utilisateur

        Note: la cascade supprime produits, rappels, notifications et listes.
        """
        user = self.get_user_by_id(user_id)

        if not user:
            return False

        self.db.delete(user)
        logger.info(f"User deleted: {user_id}")
        return True
