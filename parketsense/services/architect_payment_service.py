"""
Architect payment service: the ledger of commission paid out per phase.

The expected commission is never stored. It is computed from the phase totals
(calculate_phase_total), so it follows every change to rooms, variants and the
phase commission percent. Payments only record what was actually paid.
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from parketsense.models import ArchitectPayment, ArchitectPaymentStatus, Phase
from parketsense.exceptions import BusinessLogicError, NotFoundError
from parketsense.services.pricing_service import calculate_phase_total, to_decimal
from parketsense.services.order_service import parse_date
from parketsense.services.project_service import get_phase, get_project

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


def _amount(value: Any) -> Decimal:
    amount = to_decimal(value)
    if amount is None or amount <= 0:
        raise BusinessLogicError('Сумата на плащането трябва да е положително число.')
    return amount


def _status(value: Any) -> str:
    text = value.value if isinstance(value, ArchitectPaymentStatus) else str(value).strip().lower()
    try:
        return ArchitectPaymentStatus(text).value
    except ValueError:
        allowed = ', '.join(s.value for s in ArchitectPaymentStatus)
        raise BusinessLogicError(f'Невалиден статус на плащане: {value}. Позволени: {allowed}')


def _text(value: Any):
    if value is None:
        return None
    return str(value).strip() or None


def _payment_date(value: Any) -> date:
    return parse_date(value, 'payment_date') or date.today()


FIELDS = {
    'amount': _amount,
    'payment_date': _payment_date,
    'status': _status,
    'payment_method': _text,
    'reference_number': _text,
    'description': _text,
}


def get_payment(session: Session, payment_id: Any) -> ArchitectPayment:
    payment = session.query(ArchitectPayment).filter(ArchitectPayment.id == payment_id).first()
    if not payment:
        raise NotFoundError(f'Плащане към архитект {payment_id} не е намерено.')
    return payment


def list_payments(session: Session) -> List[ArchitectPayment]:
    """All payments, newest payment date first."""
    return session.query(ArchitectPayment).order_by(
        ArchitectPayment.payment_date.desc(), ArchitectPayment.id.desc()
    ).all()


def list_phase_payments(session: Session, phase_id: Any) -> List[ArchitectPayment]:
    get_phase(session, phase_id)
    return session.query(ArchitectPayment).filter(ArchitectPayment.phase_id == phase_id).order_by(
        ArchitectPayment.payment_date.desc(), ArchitectPayment.id.desc()
    ).all()


def create_payment(session: Session, phase_id: Any, data: Dict[str, Any]) -> ArchitectPayment:
    """
    Record a commission payment on a phase.

    Rejected unless the phase includes the architect commission. Status
    defaults to pending and the payment date to today.
    """
    phase = get_phase(session, phase_id)
    if not phase.include_architect_commission:
        raise BusinessLogicError('Архитектската комисионна не е включена за този етап.')

    values = {name: convert(data[name]) for name, convert in FIELDS.items() if name in data}
    if 'amount' not in values:
        raise BusinessLogicError('Полето amount е задължително.')
    values.setdefault('payment_date', date.today())
    values.setdefault('status', ArchitectPaymentStatus.PENDING.value)

    try:
        payment = ArchitectPayment(**values)
        phase.architect_payments.append(payment)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"Architect payment of {payment.amount} ({payment.status}) recorded on phase {phase.id}")
    return payment


def update_payment(session: Session, payment_id: Any, data: Dict[str, Any]) -> ArchitectPayment:
    """PATCH-style update; only keys present in `data` are changed."""
    payment = get_payment(session, payment_id)
    values = {name: convert(data[name]) for name, convert in FIELDS.items() if name in data}

    try:
        for name, value in values.items():
            setattr(payment, name, value)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"Architect payment {payment.id} updated: {', '.join(values) or 'no changes'}")
    return payment


def delete_payment(session: Session, payment_id: Any) -> None:
    payment = get_payment(session, payment_id)
    try:
        payment.phase.architect_payments.remove(payment)
        session.commit()
    except Exception:
        session.rollback()
        raise
    logger.info(f"Architect payment {payment_id} deleted")


def phase_commission_stats(phase: Phase) -> Dict[str, Any]:
    """
    Commission position of a phase.

    expected  = architect commission from the phase totals
    paid      = sum of completed payments
    pending   = sum of pending payments
    remaining = expected - paid (negative when overpaid)
    """
    totals = calculate_phase_total(phase)
    payments = list(phase.architect_payments)
    completed = [p for p in payments if p.status == ArchitectPaymentStatus.COMPLETED.value]
    pending = [p for p in payments if p.status == ArchitectPaymentStatus.PENDING.value]

    expected = totals['architect_commission']
    paid = sum((to_decimal(p.amount) or ZERO for p in completed), ZERO)

    return {
        'phase_id': phase.id,
        'phase_name': phase.name,
        'total_phase_value': totals['subtotal'],
        'commission_percent': totals['architect_commission_percent'],
        'expected_commission': expected,
        'paid_amount': paid,
        'pending_amount': sum((to_decimal(p.amount) or ZERO for p in pending), ZERO),
        'remaining_amount': expected - paid,
        'payment_count': len(payments),
        'completed_payment_count': len(completed),
        'pending_payment_count': len(pending),
    }


def project_commission_stats(session: Session, project_id: Any) -> Dict[str, Any]:
    """Commission stats of every phase of a project plus their sums."""
    project = get_project(session, project_id)
    phases = [phase_commission_stats(phase) for phase in project.phases]

    def total(key):
        return sum((stats[key] for stats in phases), ZERO)

    return {
        'project_id': project.id,
        'phases': phases,
        'total_expected_commission': total('expected_commission'),
        'total_paid_amount': total('paid_amount'),
        'total_pending_amount': total('pending_amount'),
        'total_remaining_amount': total('remaining_amount'),
        'total_payment_count': sum(stats['payment_count'] for stats in phases),
        'total_completed_payment_count': sum(stats['completed_payment_count'] for stats in phases),
        'total_pending_payment_count': sum(stats['pending_payment_count'] for stats in phases),
    }
