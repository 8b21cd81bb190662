from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from aayutrace.core.database import Base

FAMILY_ROLES = ("owner", "admin", "member")


class Family(Base):
    __tablename__ = "families"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    created_by = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    members = relationship(
        "FamilyMember", back_populates="family", cascade="all, delete-orphan"
    )
    invitations = relationship(
        "FamilyInvitation", back_populates="family", cascade="all, delete-orphan"
    )
    products = relationship("Product", back_populates="family")

    def __repr__(self):
        return f"<Family(id={self.id}, name={self.name})>"


class FamilyMember(Base):
    __tablename__ = "family_members"

    id = Column(Integer, primary_key=True, index=True)
    family_id = Column(
        Integer, ForeignKey("families.id", ondelete="CASCADE"), nullable=False
    )
    # Un utilisateur appartient à une seule famille
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    role = Column(String, nullable=False, default="member")

    joined_at = Column(DateTime, default=datetime.utcnow)

    family = relationship("Family", back_populates="members")
    user = relationship("User", back_populates="family_membership")

    def __repr__(self):
        return f"<FamilyMember(family_id={self.family_id}, user_id={self.user_id}, role={self.role})>"


class FamilyInvitation(Base):
    __tablename__ = "family_invitations"

    id = Column(Integer, primary_key=True, index=True)
    family_id = Column(
        Integer, ForeignKey("families.id", ondelete="CASCADE"), nullable=False
    )
    invited_by = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    email = Column(String, nullable=False, index=True)
    token = Column(String, nullable=False, unique=True, index=True)

    expires_at = Column(DateTime, nullable=False)
    used_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    family = relationship("Family", back_populates="invitations")
    inviter = relationship("User")

    __table_args__ = (
        Index("ix_invitation_family_pending", "family_id", "used_at"),
    )

    def is_pending(self, now: datetime) -> bool:
        return self.used_at is None and self.expires_at > now

    def __repr__(self):
        return f"<FamilyInvitation(id={self.id}, email={self.email}, used={self.used_at is not None})>"
