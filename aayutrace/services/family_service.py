from sqlalchemy.orm import Session
from typing import Optional, Dict, Any, List
from datetime import datetime, timedelta
import secrets
import logging

from aayutrace.middleware.transaction_handler import transactional
from aayutrace.models.family import Family, FamilyMember, FamilyInvitation
from aayutrace.models.product import Product
from aayutrace.models.user import User
from aayutrace.core.config import settings
from aayutrace.services.email_service import EmailService
from aayutrace.utils.exceptions import (
    StaleReferenceError,
    AlreadyInFamilyError,
    FamilyPermissionError,
)

logger = logging.getLogger(__name__)

MANAGER_ROLES = ("owner", "admin")


class FamilyService:
    """
    Familles et invitations

    - Un utilisateur appartient au plus à une famille
    - Seuls owner et admin invitent ou retirent des membres
    - Une invitation est à usage unique et expire après INVITATION_EXPIRE_DAYS
    """

    def __init__(self, db: Session, email_service: Optional[EmailService] = None):
        self.db = db
        self.email_service = email_service or EmailService()

    def get_membership(self, user_id: int) -> Optional[FamilyMember]:
        return (
            self.db.query(FamilyMember).filter(FamilyMember.user_id == user_id).first()
        )

    def _require_membership(self, user: User) -> FamilyMember:
        membership = self.get_membership(user.id)
        if not membership:
            raise StaleReferenceError(
                "family", "me", reason="You are not a member of any family"
            )
        return membership

    def _require_manager(self, user: User, action: str) -> FamilyMember:
        membership = self._require_membership(user)
        if membership.role not in MANAGER_ROLES:
            raise FamilyPermissionError(action)
        return membership

    @transactional
    def create_family(self, user: User, name: str) -> Family:
        if self.get_membership(user.id):
            raise AlreadyInFamilyError(user.id)

        family = Family(name=name, created_by=user.id)
        self.db.add(family)
        self.db.flush()

        self.db.add(FamilyMember(family_id=family.id, user_id=user.id, role="owner"))
        self.db.flush()

        logger.info(f"Family created: {family.id} by user {user.id}")
        return family

    def get_overview(self, user: User) -> Dict[str, Any]:
        membership = self._require_membership(user)
        family = membership.family
        now = datetime.utcnow()

        members = [
            {
                "id": member.id,
                "user_id": member.user_id,
                "role": member.role,
                "joined_at": member.joined_at,
                "full_name": member.user.full_name,
                "email": member.user.email,
            }
            for member in sorted(family.members, key=lambda m: m.joined_at)
        ]

        pending = []
        if membership.role in MANAGER_ROLES:
            pending = [inv for inv in family.invitations if inv.is_pending(now)]

        return {
            "id": family.id,
            "name": family.name,
            "created_by": family.created_by,
            "created_at": family.created_at,
            "role": membership.role,
            "members": members,
            "pending_invitations": pending,
        }

    def invite(self, user: User, email: str) -> Dict[str, Any]:
        """
        Crée une invitation et envoie l'email (best-effort)

        L'invitation est enregistrée même si l'email échoue : le lien
        est renvoyé pour être partagé manuellement.
        """
        membership = self._require_manager(user, "invite members")
        email = email.lower()

        existing_user = self.db.query(User).filter(User.email == email).first()
        if existing_user:
            existing_membership = self.get_membership(existing_user.id)
            if existing_membership and existing_membership.family_id == membership.family_id:
                raise ValueError("This user is already a member of your family")

        invitation = FamilyInvitation(
            family_id=membership.family_id,
            invited_by=user.id,
            email=email,
            token=secrets.token_urlsafe(32),
            expires_at=datetime.utcnow() + timedelta(days=settings.INVITATION_EXPIRE_DAYS),
        )
        self.db.add(invitation)
        self.db.commit()
        self.db.refresh(invitation)
        logger.info(f"Invitation {invitation.id} created for {email}")

        invitation_url = f"{settings.FRONTEND_URL}/join-family?token={invitation.token}"
        email_sent = self.email_service.send_invitation_email(
            email,
            membership.family.name,
            user.full_name or user.email,
            invitation_url,
        )

        warnings = []
        if not email_sent:
            warnings.append(
                "Invitation created, but the email could not be sent. Share the link manually."
            )

        return {
            "invitation": invitation,
            "invitation_url": invitation_url,
            "email_sent": email_sent,
            "warnings": warnings,
        }

    def get_pending_invitation(self, token: str) -> FamilyInvitation:
        invitation = (
            self.db.query(FamilyInvitation).filter(FamilyInvitation.token == token).first()
        )
        if not invitation or not invitation.is_pending(datetime.utcnow()):
            raise StaleReferenceError(
                "invitation", token, reason="This invitation is invalid, expired or already used"
            )
        return invitation

    def preview_invitation(self, token: str) -> Dict[str, Any]:
        invitation = self.get_pending_invitation(token)
        inviter = invitation.inviter
        return {
            "family_id": invitation.family_id,
            "family_name": invitation.family.name,
            "email": invitation.email,
            "invited_by": (inviter.full_name or inviter.email) if inviter else None,
            "expires_at": invitation.expires_at,
        }

    @transactional
    def join(self, user: User, token: str) -> FamilyMember:
        invitation = self.get_pending_invitation(token)

        if self.get_membership(user.id):
            raise AlreadyInFamilyError(user.id)

        member = FamilyMember(
            family_id=invitation.family_id, user_id=user.id, role="member"
        )
        self.db.add(member)
        invitation.used_at = datetime.utcnow()
        self.db.flush()

        logger.info(f"User {user.id} joined family {invitation.family_id}")
        return member

    def _unshare_products(self, user_id: int, family_id: int) -> int:
        return (
            self.db.query(Product)
            .filter(Product.user_id == user_id, Product.family_id == family_id)
            .update({"family_id": None}, synchronize_session=False)
        )

    @transactional
    def remove_member(self, user: User, member_id: int) -> None:
        membership = self._require_manager(user, "remove members")

        member = (
            self.db.query(FamilyMember)
            .filter(
                FamilyMember.id == member_id,
                FamilyMember.family_id == membership.family_id,
            )
            .first()
        )
        if not member:
            raise StaleReferenceError("family_member", member_id)

        if member.role == "owner":
            raise FamilyPermissionError("remove the family owner")
        if member.user_id == user.id:
            raise ValueError("Use the leave endpoint to leave your family")

        self._unshare_products(member.user_id, membership.family_id)
        self.db.delete(member)
        logger.info(f"Member {member_id} removed from family {membership.family_id}")

    @transactional
    def leave(self, user: User) -> None:
        """
        Quitte la famille courante

        Le propriétaire ne peut partir que s'il est seul ; la famille
        est alors supprimée.
        """
        membership = self._require_membership(user)
        family = membership.family
        others: List[FamilyMember] = [m for m in family.members if m.user_id != user.id]

        if membership.role == "owner" and others:
            raise ValueError(
                "The family owner cannot leave while other members remain"
            )

        self._unshare_products(user.id, family.id)

        if not others:
            self.db.delete(family)
            logger.info(f"Family {family.id} deleted after last member left")
        else:
            self.db.delete(membership)
            logger.info(f"User {user.id} left family {family.id}")
