from sqlalchemy import Column, DateTime, JSON, String, func
from .base import Base


class CartSlot(Base):
    """Session-scoped persisted cart: one serialized line array per session."""

    __tablename__ = "cart_slot"

    session_id = Column(String(128), primary_key=True)
    slot = Column(String(32), primary_key=True, default="cart")
    lines = Column(JSON, nullable=False)
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
