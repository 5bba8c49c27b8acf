from fastapi_users.db import SQLAlchemyBaseUserTable
from sqlalchemy import Column, String, Boolean, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from menuboard.models.base import Base


class User(SQLAlchemyBaseUserTable[int], Base):
    """
    A user account is the tenant: every menu hangs from exactly one user.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name = Column(String(120), nullable=True)
    subdomain = Column(String(63), unique=True, nullable=True)  # public menus resolve the tenant from this
    active = Column(Boolean, nullable=False, default=True)

    menus = relationship("Menu", back_populates="user", cascade="all, delete-orphan")
