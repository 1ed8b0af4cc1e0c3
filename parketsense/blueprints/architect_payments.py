"""Architect commission payments per phase, with commission stats."""
from flask import Blueprint, jsonify
from parketsense.database import get_session
from parketsense.services import architect_payment_service
from parketsense.services.project_service import get_phase
from parketsense.utils.http import json_payload
from parketsense.utils.serializers import serialize_architect_payment, serialize_commission_stats

architect_payments_bp = Blueprint('architect_payments', __name__, url_prefix='/api')


@architect_payments_bp.route('/architect-payments', methods=['GET'])
def list_payments():
    payments = architect_payment_service.list_payments(get_session())
    return jsonify({'payments': [serialize_architect_payment(p) for p in payments]})


@architect_payments_bp.route('/phases/<int:phase_id>/architect-payments', methods=['GET'])
def list_phase_payments(phase_id):
    payments = architect_payment_service.list_phase_payments(get_session(), phase_id)
    return jsonify({'payments': [serialize_architect_payment(p) for p in payments]})


@architect_payments_bp.route('/phases/<int:phase_id>/architect-payments', methods=['POST'])
def create_payment(phase_id):
    """
    Record a commission payment.

    Body: amount (required, > 0), payment_date (YYYY-MM-DD, defaults to today),
    status (pending / completed / cancelled, defaults to pending),
    payment_method, reference_number, description.
    """
    payment = architect_payment_service.create_payment(get_session(), phase_id, json_payload())
    return jsonify(serialize_architect_payment(payment)), 201


@architect_payments_bp.route('/phases/<int:phase_id>/architect-payments/stats', methods=['GET'])
def phase_stats(phase_id):
    phase = get_phase(get_session(), phase_id)
    return jsonify(serialize_commission_stats(architect_payment_service.phase_commission_stats(phase)))


@architect_payments_bp.route('/projects/<int:project_id>/architect-payments/stats', methods=['GET'])
def project_stats(project_id):
    stats = architect_payment_service.project_commission_stats(get_session(), project_id)
    return jsonify(serialize_commission_stats(stats))


@architect_payments_bp.route('/architect-payments/<int:payment_id>', methods=['GET'])
def get_payment(payment_id):
    payment = architect_payment_service.get_payment(get_session(), payment_id)
    return jsonify(serialize_architect_payment(payment))


@architect_payments_bp.route('/architect-payments/<int:payment_id>', methods=['PATCH'])
def update_payment(payment_id):
    payment = architect_payment_service.update_payment(get_session(), payment_id, json_payload())
    return jsonify(serialize_architect_payment(payment))


@architect_payments_bp.route('/architect-payments/<int:payment_id>', methods=['DELETE'])
def delete_payment(payment_id):
    architect_payment_service.delete_payment(get_session(), payment_id)
    return '', 204
