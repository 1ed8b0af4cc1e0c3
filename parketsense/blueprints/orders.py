"""Orders: list with derived overall status, sub-status updates and payments."""
from flask import Blueprint, jsonify, request
from parketsense.database import get_session
from parketsense.services import order_service
from parketsense.services.order_status_service import count_by_status, status_choices
from parketsense.utils.http import json_payload
from parketsense.utils.serializers import serialize_order, serialize_payment, serialize_history

orders_bp = Blueprint('orders', __name__, url_prefix='/api/orders')


@orders_bp.route('', methods=['GET'])
def list_orders():
    """
    List orders.

    Query params:
        q: search in order number, project and client name
        status: overall status code or label ('all' for every order)
        supplier: exact supplier name ('all' for every supplier)

    The counts cover the search/supplier result before the status filter,
    so the status tabs always show how many orders each one holds.
    """
    session = get_session()
    search = request.args.get('q', '').strip()
    status = request.args.get('status', '').strip()
    supplier = request.args.get('supplier', '').strip()

    unfiltered = order_service.list_orders(session, search=search, supplier=supplier)
    orders = order_service.list_orders(session, search=search, status=status, supplier=supplier)

    return jsonify({
        'orders': [serialize_order(o) for o in orders],
        'counts': count_by_status(unfiltered),
        'statuses': status_choices(),
        'suppliers': order_service.list_suppliers(session),
    })


@orders_bp.route('', methods=['POST'])
def create_order():
    order = order_service.create_order(get_session(), json_payload())
    return jsonify(serialize_order(order)), 201


@orders_bp.route('/<int:order_id>', methods=['GET'])
def get_order(order_id):
    order = order_service.get_order(get_session(), order_id)
    data = serialize_order(order)
    data['payments'] = [serialize_payment(p) for p in order.payments]
    return jsonify(data)


@orders_bp.route('/<int:order_id>/status', methods=['PATCH'])
def update_status(order_id):
    """Body: status_type (confirmation|payment|delivery), status, notes (optional)."""
    data = json_payload()
    order = order_service.update_order_status(
        get_session(), order_id,
        data.get('status_type'), data.get('status'),
        notes=data.get('notes'),
    )
    return jsonify(serialize_order(order))


@orders_bp.route('/<int:order_id>/payments', methods=['POST'])
def add_payment(order_id):
    session = get_session()
    payment = order_service.add_payment(session, order_id, json_payload())
    return jsonify({
        'payment': serialize_payment(payment),
        'order': serialize_order(payment.order),
    }), 201


@orders_bp.route('/<int:order_id>/history', methods=['GET'])
def get_history(order_id):
    order = order_service.get_order(get_session(), order_id)
    return jsonify({'history': [serialize_history(h) for h in order.history]})
