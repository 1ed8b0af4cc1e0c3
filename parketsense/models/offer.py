"""Offer model."""
import enum
from datetime import date
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, Date, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from parketsense.database import Base, BigIntPK


class OfferStatus(enum.Enum):
    """Offer status enum."""
    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class Offer(Base):
    """
    Offer (оферта) built from a phase.

    Stores a snapshot of the phase totals at creation time; the live totals
    are always recomputed from the phase on read.
    """

    __tablename__ = 'offer'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    phase_id = Column(BigInteger, ForeignKey('phase.id'), nullable=False)
    offer_number = Column(String(64), nullable=False, unique=True)
    status = Column(String(20), nullable=False, default=OfferStatus.DRAFT.value)
    currency = Column(String(3), nullable=False, default='BGN')
    subtotal_amount = Column(Numeric(14, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(14, 2), nullable=False, default=0)
    commission_amount = Column(Numeric(14, 2), nullable=False, default=0)
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)
    valid_until = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    issued_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    phase = relationship('Phase', back_populates='offers')

    def __repr__(self):
        return f"<Offer(id={self.id}, number='{self.offer_number}', total={self.total_amount})>"

    @property
    def is_expired(self):
        """Check if offer is expired (calculated, not stored)."""
        if self.status in ['DRAFT', 'SENT'] and self.valid_until:
            return date.today() > self.valid_until
        return False
