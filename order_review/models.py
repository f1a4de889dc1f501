"""
SQLAlchemy Database Models

Backing table for the accepted-orders REST store.

Author: Khalil Bannouri
Version: 1.0.0
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func

from order_review.database import Base


def generate_order_id() -> str:
    """24-character hex identifier assigned by the store."""
    return uuid.uuid4().hex[:24]


class AcceptedOrderRecord(Base):
    """
    Accepted supplier order.

    Rows are only ever replaced as whole documents; there is no partial
    update path.
    """
    __tablename__ = "accepted_orders"

    # Primary Key
    id = Column(String(24), primary_key=True, default=generate_order_id)

    # =========================================================================
    # ORDER DETAILS
    # =========================================================================
    supplier_name = Column(Text, nullable=False, index=True)
    order_quantity = Column(Integer, nullable=False)
    category = Column(Text, nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    delivery_date = Column(DateTime, nullable=False, index=True)
    special_note = Column(Text, nullable=True)

    # =========================================================================
    # TIMESTAMPS
    # =========================================================================
    created_at = Column(DateTime, default=datetime.now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def to_document(self) -> dict[str, Any]:
        """Wire representation, as returned by the REST endpoints."""
        return {
            "_id": self.id,
            "supplierName": self.supplier_name,
            "orderQuantity": self.order_quantity,
            "category": self.category,
            "amount": self.amount,
            "deliveryDate": self.delivery_date.isoformat(),
            "specialNote": self.special_note,
        }

    def __repr__(self):
        return f"<AcceptedOrder {self.id} - {self.supplier_name} - {self.category}>"
