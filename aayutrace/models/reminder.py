from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    ForeignKey,
    Date,
    DateTime,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from aayutrace.core.database import Base

REMINDER_TYPES = ("expiry", "warranty")


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )

    reminder_type = Column(String, nullable=False)
    reminder_date = Column(Date, nullable=False)
    days_before = Column(Integer, nullable=False)
    is_sent = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    product = relationship("Product", back_populates="reminders")

    __table_args__ = (
        UniqueConstraint("product_id", "reminder_type", name="uq_reminder_product_type"),
        Index("ix_reminder_due", "is_sent", "reminder_date"),
    )

    def __repr__(self):
        return (
            f"<Reminder(id={self.id}, product_id={self.product_id}, "
            f"type={self.reminder_type}, date={self.reminder_date})>"
        )
