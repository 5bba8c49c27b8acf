from sqlalchemy import Column, String, Boolean, Integer, ForeignKey, DateTime, JSON, func
from sqlalchemy.orm import relationship
from menuboard.models.base import Base


class Menu(Base):
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(120), nullable=False)
    active = Column(Boolean, nullable=False, default=True)

    logo = Column(String(255), nullable=True)  # URL
    background_image = Column(String(255), nullable=True)  # URL
    color = Column(JSON, nullable=True)  # {"primary": "#RRGGBB", "secondary": "#RRGGBB"}
    pos = Column(String(255), nullable=True)  # points of sale

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="menus")
    categories = relationship(
        "Category",
        back_populates="menu",
        cascade="all, delete-orphan",
        order_by="[Category.position, Category.id]",
    )
