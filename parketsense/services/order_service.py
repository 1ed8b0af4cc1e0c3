"""Order service: numbering, creation, sub-status changes and payments."""
import enum
import logging
from datetime import datetime, date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from parketsense.models import (
    Order, OrderPayment, OrderStatusHistory,
    ConfirmationStatus, PaymentStatus, DeliveryStatus, StatusType, STATUS_ENUMS
)
from parketsense.exceptions import BusinessLogicError, NotFoundError
from parketsense.services.pricing_service import to_decimal, calculate_variant_total, round_money
from parketsense.services.order_status_service import filter_orders_by_status
from parketsense.services.project_service import get_variant

logger = logging.getLogger(__name__)

ORDER_NUMBER_DIGITS = 6


def generate_order_number(session: Session, year: Optional[int] = None) -> str:
    """Next order number for the year: ORD-<year>-<000001>."""
    year = year or date.today().year
    prefix = f"ORD-{year}-"

    last = session.query(Order.order_number).filter(
        Order.order_number.like(f'{prefix}%')
    ).order_by(Order.order_number.desc()).first()

    next_number = 1
    if last:
        try:
            next_number = int(last[0].split('-')[2]) + 1
        except (IndexError, ValueError):
            logger.warning(f"Unparseable order number {last[0]}, restarting sequence")
    return f"{prefix}{str(next_number).zfill(ORDER_NUMBER_DIGITS)}"


def parse_date(value: Any, field: str) -> Optional[date]:
    if value in (None, ''):
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value), '%Y-%m-%d').date()
    except ValueError:
        raise BusinessLogicError(f'Невалидна дата за {field}. Използвайте ГГГГ-ММ-ДД.')


def get_order(session: Session, order_id: Any) -> Order:
    order = session.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise NotFoundError(f'Поръчка {order_id} не е намерена.')
    return order


def create_order(session: Session, data: Dict[str, Any]) -> Order:
    """
    Create an order with all sub-statuses at their initial value.

    When variant_id is given the order amount is the variant's computed total
    and project/client names are taken from the variant's hierarchy.
    """
    total = to_decimal(data.get('total_amount'))
    project_name = data.get('project_name')
    client_name = data.get('client_name')
    variant = None

    if data.get('variant_id'):
        variant = get_variant(session, data['variant_id'])
        if total is None:
            total = round_money(calculate_variant_total(variant)['total'])
        project = variant.phase.project
        project_name = project_name or project.name
        client_name = client_name or (project.client.name if project.client else None)

    if total is None or total < 0:
        raise BusinessLogicError('Сумата на поръчката е задължителна и не може да е отрицателна.')

    try:
        order = Order(
            order_number=generate_order_number(session),
            variant_id=variant.id if variant else None,
            project_name=project_name,
            client_name=client_name,
            supplier=data.get('supplier'),
            order_date=parse_date(data.get('order_date'), 'order_date') or date.today(),
            expected_delivery_date=parse_date(data.get('expected_delivery_date'), 'expected_delivery_date'),
            total_amount=total,
            paid_amount=Decimal('0'),
            currency=(data.get('currency') or 'BGN').upper(),
            confirmation_status=ConfirmationStatus.PENDING.value,
            payment_status=PaymentStatus.UNPAID.value,
            delivery_status=DeliveryStatus.PENDING.value,
            notes=data.get('notes'),
        )
        session.add(order)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"Order created: {order.order_number} total={order.total_amount} {order.currency}")
    return order


def _status_text(value: Any) -> str:
    if isinstance(value, enum.Enum):
        value = value.value
    return str(value).strip().lower()


def _validate_status_change(status_type: Any, new_status: Any) -> Tuple[StatusType, str]:
    try:
        status_type = StatusType(_status_text(status_type))
    except ValueError:
        allowed = ', '.join(t.value for t in StatusType)
        raise BusinessLogicError(f'Невалиден тип статус: {status_type}. Позволени: {allowed}')

    enum_cls = STATUS_ENUMS[status_type]
    try:
        value = enum_cls(_status_text(new_status)).value
    except ValueError:
        allowed = ', '.join(s.value for s in enum_cls)
        raise BusinessLogicError(f'Невалиден статус {new_status} за {status_type.value}. Позволени: {allowed}')
    return status_type, value


def _record_change(order: Order, status_type: StatusType, new_status: str, notes: Optional[str]) -> None:
    column = f'{status_type.value}_status'
    old_status = getattr(order, column)
    setattr(order, column, new_status)
    order.last_status_type = status_type.value
    order.last_status_update = datetime.now()
    order.history.append(OrderStatusHistory(
        status_type=status_type.value,
        old_status=old_status,
        new_status=new_status,
        notes=notes,
    ))


def update_order_status(session: Session, order_id: Any, status_type: Any, new_status: Any,
                        notes: Optional[str] = None) -> Order:
    """
    Change one sub-status of an order and record it in the status history.

    Only known values are accepted here; the overall status derived from the
    three sub-statuses is not stored.
    """
    status_type, value = _validate_status_change(status_type, new_status)

    try:
        order = get_order(session, order_id)
        old_status = getattr(order, f'{status_type.value}_status')
        _record_change(order, status_type, value, notes)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"Order {order.order_number}: {status_type.value} {old_status} -> {value}")
    return order


def add_payment(session: Session, order_id: Any, data: Dict[str, Any]) -> OrderPayment:
    """
    Register a payment and move the payment status.

    The paid amount accumulates; the order becomes `paid` once it reaches the
    order total, `partial` otherwise.
    """
    amount = to_decimal(data.get('amount'))
    if amount is None or amount <= 0:
        raise BusinessLogicError('Сумата на плащането трябва да е положително число.')

    try:
        order = get_order(session, order_id)
        payment = OrderPayment(
            amount=amount,
            payment_type=(data.get('payment_type') or 'advance').strip().lower(),
            payment_date=parse_date(data.get('payment_date'), 'payment_date') or date.today(),
            reference_number=data.get('reference_number'),
            notes=data.get('notes'),
        )
        order.payments.append(payment)

        order.paid_amount = (order.paid_amount or Decimal('0')) + amount
        if order.paid_amount >= order.total_amount:
            new_status = PaymentStatus.PAID.value
        else:
            new_status = PaymentStatus.PARTIAL.value

        _record_change(order, StatusType.PAYMENT, new_status, f'Добавено плащане: {amount} {order.currency}')
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"Payment of {amount} registered on {order.order_number}, paid={order.paid_amount}")
    return payment


def list_orders(session: Session, search: str = '', status: Optional[str] = None,
                supplier: Optional[str] = None) -> List[Order]:
    """
    Orders, most recent first, filtered by free text, overall status and supplier.

    The overall status filter is applied after loading because the status is
    derived, not stored.
    """
    query = session.query(Order)

    if search:
        pattern = f'%{search.strip()}%'
        query = query.filter(or_(
            Order.order_number.ilike(pattern),
            Order.project_name.ilike(pattern),
            Order.client_name.ilike(pattern),
        ))

    if supplier and supplier != 'all':
        query = query.filter(Order.supplier == supplier)

    orders = query.order_by(Order.id.desc()).all()
    return filter_orders_by_status(orders, status)


def list_suppliers(session: Session) -> List[str]:
    """Distinct suppliers present on orders, for the supplier filter."""
    rows = session.query(Order.supplier).filter(Order.supplier.isnot(None)).distinct().order_by(Order.supplier).all()
    return [row[0] for row in rows]
