"""
Overall order status derivation.

An order carries three independent sub-statuses (confirmation, payment,
delivery). Lists and filters show a single overall status instead, derived by
a fixed rule order: confirmation and payment block everything after them, so a
delivery flag never surfaces on an unconfirmed or unpaid order.

The overall status is never stored. Resolve it again whenever any of the three
inputs change.

Sub-status values are compared case- and whitespace-insensitively, so
' CONFIRMED ' counts as confirmed here, whereas a strict equality check on the
stored lowercase value would leave it UNCONFIRMED.
"""
import enum
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional

from parketsense.models.order import ConfirmationStatus, PaymentStatus, DeliveryStatus


class OverallStatus(str, enum.Enum):
    """Derived display status of an order."""
    UNCONFIRMED = 'UNCONFIRMED'
    UNPAID = 'UNPAID'
    PARTIALLY_PAID = 'PARTIALLY_PAID'
    AWAITING_DELIVERY = 'AWAITING_DELIVERY'
    IN_DELIVERY = 'IN_DELIVERY'
    DELIVERED = 'DELIVERED'
    UNKNOWN = 'UNKNOWN'


# status -> (label, css_class, priority)
STATUS_DISPLAY = OrderedDict([
    (OverallStatus.UNCONFIRMED, ('НЕПОТВЪРДЕНА', 'bg-gray-100 text-gray-800', 1)),
    (OverallStatus.UNPAID, ('НЕПЛАТЕНА', 'bg-red-100 text-red-800', 2)),
    (OverallStatus.PARTIALLY_PAID, ('ЧАСТИЧНО ПЛАТЕНА', 'bg-orange-100 text-orange-800', 3)),
    (OverallStatus.AWAITING_DELIVERY, ('ОЧАКВАМЕ ДОСТАВКА', 'bg-blue-100 text-blue-800', 4)),
    (OverallStatus.IN_DELIVERY, ('В ДОСТАВКА', 'bg-purple-100 text-purple-800', 5)),
    (OverallStatus.DELIVERED, ('ДОСТАВЕНА', 'bg-green-100 text-green-800', 6)),
    (OverallStatus.UNKNOWN, ('НЕИЗВЕСТНА', 'bg-gray-100 text-gray-800', 0)),
])


def _normalize(value: Any) -> Optional[str]:
    """Reduce an enum member or string to its lowercase value; anything else to None."""
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, str):
        return value.strip().lower()
    return None


def _read(order: Any, name: str) -> Any:
    """Read a field from an ORM object or a plain dict."""
    if order is None:
        return None
    if isinstance(order, dict):
        return order.get(name)
    return getattr(order, name, None)


def derive_overall_status(confirmation_status, payment_status, delivery_status) -> OverallStatus:
    """
    Collapse the three sub-statuses into one overall status.

    Rules are checked in this exact order, first match wins:

    1. not confirmed                     -> UNCONFIRMED
    2. unpaid                            -> UNPAID
    3. partially paid                    -> PARTIALLY_PAID
    4. paid and delivery pending         -> AWAITING_DELIVERY
    5. delivery in transit               -> IN_DELIVERY
    6. delivered                         -> DELIVERED
    7. anything else                     -> UNKNOWN

    Never raises; unrecognised values simply fail to match their rule.
    """
    confirmation = _normalize(confirmation_status)
    payment = _normalize(payment_status)
    delivery = _normalize(delivery_status)

    if confirmation != ConfirmationStatus.CONFIRMED.value:
        return OverallStatus.UNCONFIRMED
    if payment == PaymentStatus.UNPAID.value:
        return OverallStatus.UNPAID
    if payment == PaymentStatus.PARTIAL.value:
        return OverallStatus.PARTIALLY_PAID
    if payment == PaymentStatus.PAID.value and delivery == DeliveryStatus.PENDING.value:
        return OverallStatus.AWAITING_DELIVERY
    if delivery == DeliveryStatus.IN_TRANSIT.value:
        return OverallStatus.IN_DELIVERY
    if delivery == DeliveryStatus.DELIVERED.value:
        return OverallStatus.DELIVERED
    return OverallStatus.UNKNOWN


def describe_status(status: OverallStatus) -> Dict[str, Any]:
    """Badge data for an overall status."""
    label, css_class, priority = STATUS_DISPLAY[status]
    return {
        'status': status.value,
        'label': label,
        'css_class': css_class,
        'priority': priority,
    }


def resolve_overall_status(order: Any) -> Dict[str, Any]:
    """
    Resolve the overall status badge for an order (ORM object or dict).

    Returns:
        Dict with keys: status, label, css_class, priority
    """
    status = derive_overall_status(
        _read(order, 'confirmation_status'),
        _read(order, 'payment_status'),
        _read(order, 'delivery_status'),
    )
    return describe_status(status)


def _matches(order: Any, wanted: str) -> bool:
    resolved = resolve_overall_status(order)
    return wanted == resolved['status'] or wanted == resolved['label']


def filter_orders_by_status(orders: Iterable[Any], status: Optional[str]) -> List[Any]:
    """
    Keep orders whose derived status equals `status`.

    `status` is compared exactly against the status code (e.g. 'UNPAID') or the
    display label. Empty or 'all' keeps every order.
    """
    orders = list(orders)
    if not status or status == 'all':
        return orders
    return [order for order in orders if _matches(order, status)]


def count_by_status(orders: Iterable[Any]) -> Dict[str, int]:
    """Number of orders per overall status, every status present (zeros included)."""
    counts = OrderedDict((status.value, 0) for status in STATUS_DISPLAY)
    for order in orders:
        counts[resolve_overall_status(order)['status']] += 1
    return dict(counts)


def status_choices() -> List[Dict[str, Any]]:
    """Every overall status with its badge data, for filter dropdowns."""
    return [describe_status(status) for status in STATUS_DISPLAY]
