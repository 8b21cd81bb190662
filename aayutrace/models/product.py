from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Numeric,
    Boolean,
    ForeignKey,
    Date,
    DateTime,
    Index,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from aayutrace.core.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    family_id = Column(
        Integer, ForeignKey("families.id", ondelete="SET NULL"), nullable=True
    )
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="RESTRICT"), nullable=True
    )

    name = Column(String, nullable=False, index=True)
    brand = Column(String)
    batch_number = Column(String)
    barcode = Column(String, index=True)
    image_url = Column(String)
    store = Column(String)
    notes = Column(Text)
    price = Column(Numeric(10, 2))

    # Dates calendaires, sans heure
    purchase_date = Column(Date)
    expiry_date = Column(Date)
    warranty_date = Column(Date)

    is_consumed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="products")
    family = relationship("Family", back_populates="products")
    category = relationship("Category", back_populates="products")
    reminders = relationship(
        "Reminder",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    notifications = relationship(
        "Notification", back_populates="product", passive_deletes=True
    )

    __table_args__ = (
        Index("ix_product_user_consumed", "user_id", "is_consumed"),
        Index("ix_product_user_expiry", "user_id", "expiry_date"),
        Index("ix_product_family", "family_id"),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name}, consumed={self.is_consumed})>"
