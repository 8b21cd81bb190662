from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from aayutrace.core.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    # NULL = catégorie par défaut partagée par tous les utilisateurs
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True
    )

    name = Column(String, nullable=False)
    icon = Column(String)
    color = Column(String)

    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="categories")
    products = relationship("Product", back_populates="category")
    shopping_list_items = relationship("ShoppingListItem", back_populates="category")

    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name})>"
