"""Product model."""
from sqlalchemy import Column, String, Boolean, Numeric, DateTime
from sqlalchemy.sql import func
from parketsense.database import Base, BigIntPK


class Product(Base):
    """Catalogue product with cost/sale prices in BGN and EUR."""

    __tablename__ = 'product'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    code = Column(String(64), nullable=False, unique=True)
    name_bg = Column(String(255), nullable=False)
    name_en = Column(String(255), nullable=True)
    supplier = Column(String(200), nullable=True)
    unit = Column(String(16), nullable=False, default='m2')
    package_size = Column(String(50), nullable=True)
    cost_eur = Column(Numeric(12, 2), nullable=False, default=0)
    cost_bgn = Column(Numeric(12, 2), nullable=False, default=0)
    sale_eur = Column(Numeric(12, 2), nullable=False, default=0)
    sale_bgn = Column(Numeric(12, 2), nullable=False, default=0)
    markup = Column(Numeric(5, 2), nullable=False, default=30)  # Margin on sale price
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Product(id={self.id}, code='{self.code}', name='{self.name_bg}')>"
