"""Offer service for building client offers from a phase."""
import logging
from datetime import date, timedelta
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from parketsense.models import Offer, OfferStatus, PhaseStatus
from parketsense.exceptions import ConflictError, NotFoundError
from parketsense.services.pricing_service import calculate_phase_total, round_money
from parketsense.services.project_service import get_phase

logger = logging.getLogger(__name__)


OFFER_NUMBER_DIGITS = 6


def generate_offer_number(session: Session, year: Optional[int] = None) -> str:
    """
    Next offer number for the year: OFF-<year>-<000001>.

    Continues after the highest numeric suffix already used with the prefix
    (explicit numbers included) and skips numbers that are taken.
    """
    year = year or date.today().year
    prefix = f"OFF-{year}-"

    rows = session.query(Offer.offer_number).filter(Offer.offer_number.like(f'{prefix}%')).all()
    highest = 0
    for (offer_number,) in rows:
        suffix = offer_number[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))

    candidate = highest + 1
    while not is_offer_number_available(session, f"{prefix}{str(candidate).zfill(OFFER_NUMBER_DIGITS)}"):
        candidate += 1
    return f"{prefix}{str(candidate).zfill(OFFER_NUMBER_DIGITS)}"


def is_offer_number_available(session: Session, offer_number: str) -> bool:
    return session.query(Offer).filter(Offer.offer_number == offer_number.strip()).first() is None


def create_offer(session: Session, phase_id: Any, offer_number: Optional[str] = None,
                 valid_days: int = 30, notes: Optional[str] = None) -> Offer:
    """
    Create an offer for a phase with a snapshot of its current totals.

    An explicit offer number must be unique; otherwise one is generated.
    The phase moves to `quoted` when it was still `created`.
    """
    phase = get_phase(session, phase_id)

    offer_number = (offer_number or '').strip()
    if offer_number:
        if not is_offer_number_available(session, offer_number):
            raise ConflictError(f'Оферта с номер {offer_number} вече съществува.')
    else:
        offer_number = generate_offer_number(session)

    totals = calculate_phase_total(phase)

    try:
        offer = Offer(
            offer_number=offer_number,
            status=OfferStatus.DRAFT.value,
            subtotal_amount=round_money(totals['subtotal']),
            discount_amount=round_money(totals['discount_amount']),
            commission_amount=round_money(totals['architect_commission']),
            total_amount=round_money(totals['total']),
            valid_until=date.today() + timedelta(days=valid_days),
            notes=(notes or '').strip() or None,
        )
        phase.offers.append(offer)
        if phase.status == PhaseStatus.CREATED.value:
            phase.status = PhaseStatus.QUOTED.value
        session.commit()
    except IntegrityError:
        # Same number committed concurrently
        session.rollback()
        raise ConflictError(f'Оферта с номер {offer_number} вече съществува.')
    except Exception:
        session.rollback()
        raise

    logger.info(f"Offer {offer.offer_number} created for phase {phase.id}: total={offer.total_amount}")
    return offer


def get_offer(session: Session, offer_id: Any) -> Offer:
    offer = session.query(Offer).filter(Offer.id == offer_id).first()
    if not offer:
        raise NotFoundError(f'Оферта {offer_id} не е намерена.')
    return offer


def get_offer_summary(offer: Offer) -> Dict[str, Any]:
    """Snapshot stored on the offer next to the live recomputation of its phase."""
    return {
        'snapshot': {
            'subtotal': offer.subtotal_amount,
            'discount_amount': offer.discount_amount,
            'architect_commission': offer.commission_amount,
            'total': offer.total_amount,
        },
        'current': calculate_phase_total(offer.phase),
    }
