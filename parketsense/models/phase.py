"""Phase model."""
import enum
from sqlalchemy import Column, BigInteger, String, Text, DateTime, Numeric, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from parketsense.database import Base, BigIntPK


class PhaseStatus(enum.Enum):
    """Phase status enum."""
    CREATED = "created"
    QUOTED = "quoted"
    WON = "won"
    LOST = "lost"
    ARCHIVED = "archived"


class Phase(Base):
    """
    Phase (етап) of a project.

    Owns competing variants. Phase-level discount and architect commission
    are applied only when offer totals are computed; they never rewrite the
    discounts stored on variants, rooms or room products.
    """

    __tablename__ = 'phase'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    project_id = Column(BigInteger, ForeignKey('project.id'), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=PhaseStatus.CREATED.value)
    phase_discount = Column(Numeric(5, 2), nullable=True)
    discount_enabled = Column(Boolean, nullable=False, default=False)
    include_architect_commission = Column(Boolean, nullable=False, default=False)
    architect_commission_percent = Column(Numeric(5, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    project = relationship('Project', back_populates='phases')
    variants = relationship('Variant', back_populates='phase', cascade='all, delete-orphan',
                            order_by='Variant.variant_order')
    offers = relationship('Offer', back_populates='phase', cascade='all, delete-orphan')
    architect_payments = relationship('ArchitectPayment', back_populates='phase', cascade='all, delete-orphan',
                                      order_by='ArchitectPayment.id')

    def __repr__(self):
        return f"<Phase(id={self.id}, name='{self.name}', status='{self.status}')>"
