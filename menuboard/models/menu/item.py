from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, DateTime, Numeric, CheckConstraint, Index, func
from sqlalchemy.orm import relationship
from menuboard.models.base import Base
from menuboard.services.positions.space import POSITION_GAP


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(160), nullable=False)
    description = Column(String(500), nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    position = Column(Integer, nullable=False, default=POSITION_GAP)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    category = relationship("Category", back_populates="items")
    images = relationship(
        "ItemImage",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="[ItemImage.sort_order, ItemImage.id]",
    )

    __table_args__ = (
        CheckConstraint("position >= 0", name="ck_items_position_non_negative"),
        Index("idx_items_category_position", "category_id", "position"),
    )
