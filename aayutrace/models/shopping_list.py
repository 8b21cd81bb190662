from sqlalchemy import Column, Integer, Numeric, String, Text, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from aayutrace.core.database import Base

ITEM_PRIORITIES = ("low", "medium", "high")


class ShoppingList(Base):
    __tablename__ = "shopping_lists"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    name = Column(String, nullable=False)
    description = Column(Text)
    is_completed = Column(Boolean, default=False, nullable=False)
    generated_by = Column(String)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="shopping_lists")
    items = relationship(
        "ShoppingListItem",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        order_by="ShoppingListItem.id",
    )

    def __repr__(self):
        return f"<ShoppingList(id={self.id}, user_id={self.user_id}, name={self.name})>"


class ShoppingListItem(Base):
    __tablename__ = "shopping_list_items"

    id = Column(Integer, primary_key=True, index=True)
    shopping_list_id = Column(
        Integer, ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False
    )
    category_id = Column(
        Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )

    product_name = Column(String, nullable=False)
    brand = Column(String)
    quantity = Column(Integer, nullable=False, default=1)
    notes = Column(Text)
    priority = Column(String, nullable=False, default="medium")
    estimated_price = Column(Numeric(10, 2))
    is_completed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    shopping_list = relationship("ShoppingList", back_populates="items")
    category = relationship("Category", back_populates="shopping_list_items")

    def __repr__(self):
        return f"<ShoppingListItem(id={self.id}, product_name={self.product_name}, completed={self.is_completed})>"
