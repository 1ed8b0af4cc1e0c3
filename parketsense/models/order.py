"""Order model and its three independent sub-status enums."""
import enum
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, Date, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.sql import func
from parketsense.database import Base, BigIntPK


class ConfirmationStatus(str, enum.Enum):
    """Supplier confirmation of the order."""
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    REJECTED = 'rejected'


class PaymentStatus(str, enum.Enum):
    """Client payment progress."""
    UNPAID = 'unpaid'
    PARTIAL = 'partial'
    PAID = 'paid'


class DeliveryStatus(str, enum.Enum):
    """Delivery progress."""
    PENDING = 'pending'
    IN_TRANSIT = 'in_transit'
    DELIVERED = 'delivered'


class StatusType(str, enum.Enum):
    """Which sub-status a history record refers to."""
    CONFIRMATION = 'confirmation'
    PAYMENT = 'payment'
    DELIVERY = 'delivery'


STATUS_ENUMS = {
    StatusType.CONFIRMATION: ConfirmationStatus,
    StatusType.PAYMENT: PaymentStatus,
    StatusType.DELIVERY: DeliveryStatus,
}


class Order(Base):
    """
    Supplier order (поръчка).

    The three sub-statuses are stored as plain strings: they are written by
    separate workflows and the overall status shown in lists is always derived
    from them on read, never stored.
    """

    __tablename__ = 'client_order'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    order_number = Column(String(50), nullable=False, unique=True)
    variant_id = Column(BigInteger, ForeignKey('variant.id'), nullable=True)
    project_name = Column(String(200), nullable=True)
    client_name = Column(String(200), nullable=True)
    supplier = Column(String(200), nullable=True)
    order_date = Column(Date, nullable=True)
    expected_delivery_date = Column(Date, nullable=True)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    paid_amount = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default='BGN')
    confirmation_status = Column(String(20), nullable=False, default=ConfirmationStatus.PENDING.value)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.UNPAID.value)
    delivery_status = Column(String(20), nullable=False, default=DeliveryStatus.PENDING.value)
    last_status_type = Column(String(20), nullable=True)
    last_status_update = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    variant = relationship('Variant', foreign_keys=[variant_id])
    payments = relationship('OrderPayment', back_populates='order', cascade='all, delete-orphan',
                            order_by='OrderPayment.id')
    history = relationship('OrderStatusHistory', back_populates='order', cascade='all, delete-orphan',
                           order_by='OrderStatusHistory.id')

    @hybrid_property
    def amount_due(self):
        """Amount still owed: total - paid."""
        return (self.total_amount or 0) - (self.paid_amount or 0)

    def __repr__(self):
        return (
            f"<Order(id={self.id}, number='{self.order_number}', "
            f"statuses=({self.confirmation_status}, {self.payment_status}, {self.delivery_status}))>"
        )


class OrderPayment(Base):
    """Payment registered against an order (advance or final)."""

    __tablename__ = 'order_payment'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    order_id = Column(BigInteger, ForeignKey('client_order.id'), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_type = Column(String(20), nullable=False, default='advance')
    payment_date = Column(Date, nullable=True)
    reference_number = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    order = relationship('Order', back_populates='payments')

    def __repr__(self):
        return f"<OrderPayment(id={self.id}, order_id={self.order_id}, amount={self.amount})>"


class OrderStatusHistory(Base):
    """Audit trail of sub-status changes."""

    __tablename__ = 'order_status_history'

    id = Column(BigIntPK, primary_key=True, autoincrement=True)
    order_id = Column(BigInteger, ForeignKey('client_order.id'), nullable=False)
    status_type = Column(String(20), nullable=False)
    old_status = Column(String(20), nullable=True)
    new_status = Column(String(20), nullable=False)
    notes = Column(Text, nullable=True)
    changed_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    order = relationship('Order', back_populates='history')

    def __repr__(self):
        return f"<OrderStatusHistory(order_id={self.order_id}, {self.status_type}: {self.old_status} -> {self.new_status})>"
