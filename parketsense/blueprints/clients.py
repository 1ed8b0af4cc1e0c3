"""Clients and architects."""
from flask import Blueprint, jsonify, request
from parketsense.database import get_session
from parketsense.models import Client
from parketsense.services.project_service import create_client
from parketsense.utils.http import json_payload
from parketsense.utils.serializers import serialize_client

clients_bp = Blueprint('clients', __name__, url_prefix='/api/clients')


@clients_bp.route('', methods=['GET'])
def list_clients():
    """List clients; ?architects=1 returns only architects, ?q= filters by name."""
    session = get_session()
    query = session.query(Client)

    if request.args.get('architects') in ('1', 'true'):
        query = query.filter(Client.is_architect.is_(True))
    search = request.args.get('q', '').strip()
    if search:
        query = query.filter(Client.name.ilike(f'%{search}%'))

    clients = query.order_by(Client.name).all()
    return jsonify({'clients': [serialize_client(c) for c in clients]})


@clients_bp.route('', methods=['POST'])
def create():
    client = create_client(get_session(), json_payload())
    return jsonify(serialize_client(client)), 201
