"""Models package - exports all SQLAlchemy models."""
# Project hierarchy
from parketsense.models.client import Client
from parketsense.models.project import Project
from parketsense.models.phase import Phase, PhaseStatus
from parketsense.models.variant import Variant
from parketsense.models.room import Room
from parketsense.models.room_product import RoomProduct

# Catalogue, offers and orders
from parketsense.models.product import Product
from parketsense.models.offer import Offer, OfferStatus
from parketsense.models.architect_payment import ArchitectPayment, ArchitectPaymentStatus
from parketsense.models.order import (
    Order, OrderPayment, OrderStatusHistory,
    ConfirmationStatus, PaymentStatus, DeliveryStatus, StatusType, STATUS_ENUMS
)

__all__ = [
    'Client', 'Project', 'Phase', 'PhaseStatus', 'Variant', 'Room', 'RoomProduct',
    'Product', 'Offer', 'OfferStatus', 'ArchitectPayment', 'ArchitectPaymentStatus',
    'Order', 'OrderPayment', 'OrderStatusHistory',
    'ConfirmationStatus', 'PaymentStatus', 'DeliveryStatus', 'StatusType', 'STATUS_ENUMS',
]
