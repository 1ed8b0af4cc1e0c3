"""Variant model."""
from sqlalchemy import Column, BigInteger, Integer, String, Text, DateTime, Numeric, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from parketsense.database import Base, BigIntPK


class Variant(Base):
    """
    Variant (вариант) - one alternative material selection for a phase.

    Variants with include_in_offer=False stay computable on their own but
    contribute nothing to phase/offer totals.
    """

    __tablename__ = 'variant'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    phase_id = Column(BigInteger, ForeignKey('phase.id'), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    variant_order = Column(Integer, nullable=False, default=1)
    designer = Column(String(200), nullable=True)
    architect = Column(String(200), nullable=True)
    architect_commission = Column(Numeric(5, 2), nullable=True)
    include_in_offer = Column(Boolean, nullable=False, default=True)
    discount_enabled = Column(Boolean, nullable=False, default=True)
    variant_discount = Column(Numeric(5, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    phase = relationship('Phase', back_populates='variants')
    rooms = relationship('Room', back_populates='variant', cascade='all, delete-orphan',
                         order_by='Room.id')

    def __repr__(self):
        return f"<Variant(id={self.id}, name='{self.name}', include_in_offer={self.include_in_offer})>"
