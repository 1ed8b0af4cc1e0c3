"""Architect commission payment model."""
import enum
from sqlalchemy import Column, BigInteger, String, Numeric, Date, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from parketsense.database import Base, BigIntPK


class ArchitectPaymentStatus(str, enum.Enum):
    """Lifecycle of a commission payment."""
    PENDING = 'pending'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'


class ArchitectPayment(Base):
    """
    Payment of the architect commission earned on a phase.

    Only completed payments count as paid; pending ones are reported apart
    and cancelled ones are ignored by the commission stats.
    """

    __tablename__ = 'architect_payment'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    phase_id = Column(BigInteger, ForeignKey('phase.id'), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=ArchitectPaymentStatus.PENDING.value)
    payment_method = Column(String(50), nullable=True)  # cash, bank transfer
    reference_number = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    phase = relationship('Phase', back_populates='architect_payments')

    def __repr__(self):
        return f"<ArchitectPayment(id={self.id}, phase_id={self.phase_id}, amount={self.amount}, status='{self.status}')>"
