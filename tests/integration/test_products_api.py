"""
Integration tests for the product catalogue API.
"""

from decimal import Decimal
from parketsense.models import Product


class TestProductCreation:
    """Test product creation with derived prices."""

    def test_create_from_eur_cost(self, client, session):
        response = client.post('/api/products', json={
            'code': 'BOEN-OAK-14', 'name_bg': 'Дъб Андante', 'cost_eur': '10', 'supplier': 'Boen',
        })
        assert response.status_code == 201
        data = response.get_json()

        assert data['cost_eur'] == '10.00'
        assert data['cost_bgn'] == '19.56'
        assert data['markup'] == '30'
        assert data['sale_eur'] == '14.29'
        assert data['sale_bgn'] == '27.94'
        assert data['name_en'] == 'Дъб Андante'
        assert data['unit'] == 'm2'
        assert data['is_active'] is True

    def test_explicit_markup(self, client, session):
        data = client.post('/api/products', json={
            'code': 'P-70', 'name_bg': 'Ламинат', 'cost_bgn': 70, 'markup': 30,
        }).get_json()
        assert data['sale_bgn'] == '100.00'

    def test_default_markup_from_config(self, app, client, session):
        app.config['DEFAULT_MARKUP'] = 20
        try:
            data = client.post('/api/products', json={'code': 'P-DEF', 'name_bg': 'Винил', 'cost_bgn': 80}).get_json()
        finally:
            app.config['DEFAULT_MARKUP'] = 30
        assert data['markup'] == '20'
        assert data['sale_bgn'] == '100.00'

    def test_duplicate_code_is_conflict(self, client, session, product):
        code = product.code
        response = client.post('/api/products', json={'code': code, 'name_bg': 'Друг'})
        assert response.status_code == 409
        assert session.query(Product).filter(Product.code == code).count() == 1

    def test_markup_100_is_rejected(self, client, session):
        response = client.post('/api/products', json={
            'code': 'P-100', 'name_bg': 'Паркет', 'cost_bgn': 70, 'markup': 100,
        })
        assert response.status_code == 400

    def test_required_fields(self, client, session):
        assert client.post('/api/products', json={'name_bg': 'Без код'}).status_code == 400
        assert client.post('/api/products', json={'code': 'NO-NAME'}).status_code == 400


class TestProductList:
    """Test catalogue listing."""

    def test_list_hides_inactive(self, client, session, product):
        session.add(Product(code='OLD-1', name_bg='Стар модел', cost_bgn=Decimal('1'), cost_eur=Decimal('1'),
                            sale_bgn=Decimal('1'), sale_eur=Decimal('1'), markup=Decimal('30'), is_active=False))
        session.commit()

        codes = [p['code'] for p in client.get('/api/products').get_json()['products']]
        assert 'OLD-1' not in codes

        codes = [p['code'] for p in client.get('/api/products?include_inactive=1').get_json()['products']]
        assert 'OLD-1' in codes

    def test_search_and_get(self, client, session, product):
        product_id, code = product.id, product.code
        found = client.get('/api/products', query_string={'q': code[-8:]}).get_json()['products']
        assert [p['id'] for p in found] == [product_id]

        detail = client.get(f'/api/products/{product_id}').get_json()
        assert detail['sale_bgn'] == '50.00'
        assert client.get('/api/products/999999').status_code == 404
