"""RoomProduct model for room line items."""
from sqlalchemy import Column, BigInteger, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from parketsense.database import Base, BigIntPK


class RoomProduct(Base):
    """
    Room Product (line item).

    discount and waste_percent are optional overrides; when NULL the room
    (then variant) value applies. quantity is NULL when it follows the room area.
    """

    __tablename__ = 'room_product'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    room_id = Column(BigInteger, ForeignKey('room.id'), nullable=False)
    product_id = Column(BigInteger, ForeignKey('product.id'), nullable=False)
    quantity = Column(Numeric(12, 3), nullable=True)
    unit_price = Column(Numeric(14, 2), nullable=True)
    discount = Column(Numeric(5, 2), nullable=True)
    waste_percent = Column(Numeric(5, 2), nullable=True)

    # Relationships
    room = relationship('Room', back_populates='products')
    product = relationship('Product', foreign_keys=[product_id])

    def __repr__(self):
        return f"<RoomProduct(id={self.id}, room_id={self.room_id}, qty={self.quantity}, price={self.unit_price})>"
