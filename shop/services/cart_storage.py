from typing import List

from ..db.session import SessionFactory
from ..models.cart_line import CartLine
from ..models.cart_slot import CartSlot

CART_SLOT = "cart"


class CartStorage:
    """Session-scoped persisted cart, one serialized line array per session."""

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    def load(self, session_id: str) -> List[CartLine]:
        with self._session_factory() as session:
            row = session.get(CartSlot, (session_id, CART_SLOT))
            if not row or not row.lines:
                return []
            return [CartLine.from_dict(item) for item in row.lines]

    def save(self, session_id: str, lines: List[CartLine]) -> None:
        payload = [line.to_dict() for line in lines]
        with self._session_factory() as session:
            row = session.get(CartSlot, (session_id, CART_SLOT))
            if row:
                row.lines = payload
            else:
                session.add(CartSlot(session_id=session_id, slot=CART_SLOT, lines=payload))
            session.flush()

    def erase(self, session_id: str) -> None:
        with self._session_factory() as session:
            row = session.get(CartSlot, (session_id, CART_SLOT))
            if row:
                session.delete(row)
                session.flush()
