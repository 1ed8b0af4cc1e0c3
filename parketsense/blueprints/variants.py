"""Variants, rooms and room products of a phase."""
from flask import Blueprint, jsonify
from parketsense.database import get_session
from parketsense.exceptions import BusinessLogicError
from parketsense.services import project_service
from parketsense.services.pricing_service import calculate_variant_total, calculate_room_total
from parketsense.utils.http import json_payload
from parketsense.utils.serializers import serialize_variant, serialize_room, serialize_room_product, serialize_summary

variants_bp = Blueprint('variants', __name__, url_prefix='/api')


def _variant_detail(variant):
    data = serialize_variant(variant)
    data['totals'] = serialize_summary(calculate_variant_total(variant))
    return data


def _room_detail(room):
    data = serialize_room(room)
    data['totals'] = serialize_summary(calculate_room_total(room, room.variant))
    return data


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

@variants_bp.route('/phases/<int:phase_id>/variants', methods=['GET'])
def list_variants(phase_id):
    phase = project_service.get_phase(get_session(), phase_id)
    return jsonify({'variants': [_variant_detail(v) for v in phase.variants]})


@variants_bp.route('/phases/<int:phase_id>/variants', methods=['POST'])
def create_variant(phase_id):
    variant = project_service.create_variant(get_session(), phase_id, json_payload())
    return jsonify(serialize_variant(variant)), 201


@variants_bp.route('/variants/<int:variant_id>', methods=['GET'])
def get_variant(variant_id):
    """Variant with per-room totals and the variant total."""
    variant = project_service.get_variant(get_session(), variant_id)
    return jsonify(_variant_detail(variant))


@variants_bp.route('/variants/<int:variant_id>', methods=['PATCH'])
def update_variant(variant_id):
    variant = project_service.update_variant(get_session(), variant_id, json_payload())
    return jsonify(_variant_detail(variant))


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------

@variants_bp.route('/variants/<int:variant_id>/rooms', methods=['GET'])
def list_rooms(variant_id):
    variant = project_service.get_variant(get_session(), variant_id)
    return jsonify({'rooms': [_room_detail(r) for r in variant.rooms]})


@variants_bp.route('/variants/<int:variant_id>/rooms', methods=['POST'])
def create_room(variant_id):
    room = project_service.create_room(get_session(), variant_id, json_payload())
    return jsonify(_room_detail(room)), 201


@variants_bp.route('/rooms/<int:room_id>', methods=['GET'])
def get_room(room_id):
    room = project_service.get_room(get_session(), room_id)
    return jsonify(_room_detail(room))


@variants_bp.route('/rooms/<int:room_id>', methods=['PATCH'])
def update_room(room_id):
    room = project_service.update_room(get_session(), room_id, json_payload())
    return jsonify(_room_detail(room))


@variants_bp.route('/rooms/<int:room_id>', methods=['DELETE'])
def delete_room(room_id):
    project_service.delete_room(get_session(), room_id)
    return '', 204


@variants_bp.route('/rooms/<int:room_id>/clone', methods=['POST'])
def clone_room(room_id):
    """
    Copy a room into a variant.

    Body (all optional): target_variant_id, name, product_ids (list of
    room product ids to copy; omitted copies all).
    """
    data = json_payload()
    product_ids = data.get('product_ids')
    if product_ids is not None and not isinstance(product_ids, list):
        raise BusinessLogicError('product_ids трябва да е списък.')
    try:
        room = project_service.clone_room(
            get_session(), room_id,
            target_variant_id=data.get('target_variant_id'),
            name=data.get('name'),
            product_ids=product_ids,
        )
    except (TypeError, ValueError):
        raise BusinessLogicError('product_ids трябва да съдържа числови идентификатори.')
    return jsonify(_room_detail(room)), 201


# ---------------------------------------------------------------------------
# Room products
# ---------------------------------------------------------------------------

@variants_bp.route('/rooms/<int:room_id>/products', methods=['POST'])
def add_room_product(room_id):
    room_product = project_service.add_room_product(get_session(), room_id, json_payload())
    return jsonify(serialize_room_product(room_product)), 201


@variants_bp.route('/room-products/<int:room_product_id>', methods=['PATCH'])
def update_room_product(room_product_id):
    room_product = project_service.update_room_product(get_session(), room_product_id, json_payload())
    return jsonify(serialize_room_product(room_product))


@variants_bp.route('/room-products/<int:room_product_id>', methods=['DELETE'])
def delete_room_product(room_product_id):
    project_service.delete_room_product(get_session(), room_product_id)
    return '', 204
