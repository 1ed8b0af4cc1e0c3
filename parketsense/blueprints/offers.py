"""Offers built from a phase."""
from flask import Blueprint, jsonify, current_app
from parketsense.database import get_session
from parketsense.exceptions import BusinessLogicError
from parketsense.services import offer_service
from parketsense.services.project_service import get_phase
from parketsense.utils.http import json_payload
from parketsense.utils.serializers import serialize_offer, serialize_summary

offers_bp = Blueprint('offers', __name__, url_prefix='/api')


@offers_bp.route('/phases/<int:phase_id>/offers', methods=['GET'])
def list_offers(phase_id):
    phase = get_phase(get_session(), phase_id)
    return jsonify({'offers': [serialize_offer(o) for o in phase.offers]})


@offers_bp.route('/phases/<int:phase_id>/offers', methods=['POST'])
def create_offer(phase_id):
    """
    Create an offer for a phase.

    Body (optional): offer_number (must be unique; generated when omitted),
    valid_days (defaults to OFFER_VALID_DAYS), notes.
    """
    data = json_payload()
    valid_days = data.get('valid_days', current_app.config.get('OFFER_VALID_DAYS', 30))
    try:
        valid_days = int(valid_days)
    except (TypeError, ValueError):
        raise BusinessLogicError('valid_days трябва да е цяло число.')

    offer = offer_service.create_offer(
        get_session(), phase_id,
        offer_number=str(data.get('offer_number') or ''),
        valid_days=valid_days,
        notes=data.get('notes'),
    )
    return jsonify(serialize_offer(offer)), 201


@offers_bp.route('/offers/<int:offer_id>', methods=['GET'])
def get_offer(offer_id):
    """Offer with its stored snapshot and the live recomputation of the phase."""
    offer = offer_service.get_offer(get_session(), offer_id)
    data = serialize_offer(offer)
    summary = offer_service.get_offer_summary(offer)
    data['snapshot'] = serialize_summary(summary['snapshot'])
    data['current'] = serialize_summary(summary['current'])
    data['business_name'] = current_app.config.get('BUSINESS_NAME')
    return jsonify(data)
