"""Project model."""
from sqlalchemy import Column, BigInteger, String, Text, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from parketsense.database import Base, BigIntPK


class Project(Base):
    """Project for a client; owns its phases."""

    __tablename__ = 'project'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    client_id = Column(BigInteger, ForeignKey('client.id'), nullable=False)
    architect_id = Column(BigInteger, ForeignKey('client.id'), nullable=True)
    name = Column(String(200), nullable=False)
    address = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    architect_commission = Column(Numeric(5, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    client = relationship('Client', back_populates='projects', foreign_keys=[client_id])
    architect = relationship('Client', foreign_keys=[architect_id])
    phases = relationship('Phase', back_populates='project', cascade='all, delete-orphan',
                          order_by='Phase.id')

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.name}')>"
