"""Product catalogue."""
from flask import Blueprint, jsonify, request, current_app
from sqlalchemy import or_
from parketsense.database import get_session
from parketsense.exceptions import NotFoundError
from parketsense.models import Product
from parketsense.services.product_service import create_product
from parketsense.utils.http import json_payload
from parketsense.utils.serializers import serialize_product

products_bp = Blueprint('products', __name__, url_prefix='/api/products')


@products_bp.route('', methods=['GET'])
def list_products():
    """
    List catalogue products.

    Query params: q (code or name), supplier, include_inactive=1.
    """
    session = get_session()
    query = session.query(Product)

    search = request.args.get('q', '').strip()
    if search:
        pattern = f'%{search}%'
        query = query.filter(or_(
            Product.code.ilike(pattern),
            Product.name_bg.ilike(pattern),
            Product.name_en.ilike(pattern),
        ))

    supplier = request.args.get('supplier', '').strip()
    if supplier:
        query = query.filter(Product.supplier == supplier)

    if request.args.get('include_inactive') not in ('1', 'true'):
        query = query.filter(Product.is_active.is_(True))

    products = query.order_by(Product.code).all()
    return jsonify({'products': [serialize_product(p) for p in products]})


@products_bp.route('', methods=['POST'])
def create():
    """Create a product; missing currency prices are back-filled, sale price derived from markup."""
    product = create_product(get_session(), json_payload(), current_app.config.get('DEFAULT_MARKUP'))
    return jsonify(serialize_product(product)), 201


@products_bp.route('/<int:product_id>', methods=['GET'])
def get_product(product_id):
    product = get_session().query(Product).filter(Product.id == product_id).first()
    if not product:
        raise NotFoundError(f'Продукт {product_id} не е намерен.')
    return jsonify(serialize_product(product))
