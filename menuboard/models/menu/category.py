from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, DateTime, CheckConstraint, Index, func
from sqlalchemy.orm import relationship
from menuboard.models.base import Base
from menuboard.services.positions.space import POSITION_GAP


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    menu_id = Column(Integer, ForeignKey("menus.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(120), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    position = Column(Integer, nullable=False, default=POSITION_GAP)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    menu = relationship("Menu", back_populates="categories")
    items = relationship(
        "Item",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="[Item.position, Item.id]",
    )

    __table_args__ = (
        CheckConstraint("position >= 0", name="ck_categories_position_non_negative"),
        Index("idx_categories_menu_position", "menu_id", "position"),
    )
