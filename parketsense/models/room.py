"""Room model."""
from sqlalchemy import Column, BigInteger, String, DateTime, Numeric, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from parketsense.database import Base, BigIntPK


class Room(Base):
    """
    Room (стая) inside a variant.

    Area, discount and waste_percent are the defaults for the room's products.
    Deleting a room deletes its products.
    """

    __tablename__ = 'room'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    variant_id = Column(BigInteger, ForeignKey('variant.id'), nullable=False)
    name = Column(String(200), nullable=False)
    area = Column(Numeric(10, 3), nullable=True)
    discount = Column(Numeric(5, 2), nullable=True)
    discount_enabled = Column(Boolean, nullable=False, default=True)
    waste_percent = Column(Numeric(5, 2), nullable=True, default=10)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    variant = relationship('Variant', back_populates='rooms')
    products = relationship('RoomProduct', back_populates='room', cascade='all, delete-orphan',
                            order_by='RoomProduct.id')

    def __repr__(self):
        return f"<Room(id={self.id}, name='{self.name}', area={self.area})>"
