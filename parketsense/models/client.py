"""Client model."""
from sqlalchemy import Column, BigInteger, String, Text, DateTime, Boolean, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from parketsense.database import Base, BigIntPK


class Client(Base):
    """Client (клиент). Architects are clients flagged with is_architect."""

    __tablename__ = 'client'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    is_architect = Column(Boolean, nullable=False, default=False)
    commission_percent = Column(Numeric(5, 2), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    projects = relationship('Project', back_populates='client', foreign_keys='Project.client_id')

    def __repr__(self):
        return f"<Client(id={self.id}, name='{self.name}', is_architect={self.is_architect})>"
