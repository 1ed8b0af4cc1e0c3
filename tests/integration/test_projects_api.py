"""
Integration tests for the project hierarchy API and its computed totals.
"""

import pytest
from parketsense.models import Room, RoomProduct


def _create_hierarchy(client):
    """Create client -> project -> phase -> variant through the API; return their JSON."""
    customer = client.post('/api/clients', json={'name': 'Мария Иванова'}).get_json()
    architect = client.post('/api/clients', json={
        'name': 'Арх. Петров', 'is_architect': True, 'commission_percent': 5,
    }).get_json()
    project = client.post('/api/projects', json={
        'client_id': customer['id'], 'architect_id': architect['id'], 'name': 'Къща Бояна',
    }).get_json()
    phase = client.post(f"/api/projects/{project['id']}/phases", json={'name': 'Етап 1'}).get_json()
    variant = client.post(f"/api/phases/{phase['id']}/variants", json={'name': 'Вариант A'}).get_json()
    return project, phase, variant


class TestHierarchyCreation:
    """Test creation defaults through the API."""

    def test_creation_defaults(self, client, session):
        project, phase, variant = _create_hierarchy(client)

        assert project['architect_commission'] == '5'
        assert phase['status'] == 'created'
        assert phase['discount_enabled'] is False
        assert phase['include_architect_commission'] is False
        assert phase['architect_commission_percent'] == '5'
        assert variant['include_in_offer'] is True
        assert variant['discount_enabled'] is True
        assert variant['variant_order'] == 1

        response = client.post(f"/api/variants/{variant['id']}/rooms", json={'name': 'Спалня', 'area': 14})
        assert response.status_code == 201
        room = response.get_json()
        assert room['discount_enabled'] is True
        assert room['waste_percent'] == '10'
        assert room['discount'] is None

    def test_project_requires_existing_client(self, client, session):
        response = client.post('/api/projects', json={'client_id': 999999, 'name': 'X'})
        assert response.status_code == 404
        assert response.get_json()['status'] == 'error'

    def test_missing_name_is_rejected(self, client, session, project):
        response = client.post(f'/api/projects/{project.id}/phases', json={})
        assert response.status_code == 400

    def test_negative_percentage_is_rejected(self, client, session, variant):
        response = client.post(f'/api/variants/{variant.id}/rooms', json={'name': 'Хол', 'discount': -5})
        assert response.status_code == 400

    def test_percentage_over_100_is_accepted(self, client, session, variant):
        response = client.post(f'/api/variants/{variant.id}/rooms', json={'name': 'Хол', 'discount': 150})
        assert response.status_code == 201
        assert response.get_json()['discount'] == '150'

    def test_non_object_body_is_rejected(self, client, session):
        response = client.post('/api/clients', json=['not', 'an', 'object'])
        assert response.status_code == 400


class TestTotals:
    """Test totals computed on read."""

    def test_living_room_total(self, client, session, living_room):
        room_id = living_room.id
        response = client.get(f'/api/rooms/{room_id}')
        assert response.status_code == 200
        data = response.get_json()
        line = data['totals']['products'][0]

        assert line['quantity'] == '20'
        assert line['quantity_after_waste'] == '21'
        assert line['unit_price_after_discount'] == '45.00'
        assert line['line_total'] == '945.00'
        assert data['totals']['total'] == '945.00'
        assert data['totals']['total_display'] == '945,00 лв.'

    def test_room_product_inherits_then_overrides(self, client, session, variant, product):
        room = client.post(f'/api/variants/{variant.id}/rooms', json={
            'name': 'Кабинет', 'area': 10, 'waste_percent': 0,
        }).get_json()
        added = client.post(f"/api/rooms/{room['id']}/products", json={'product_id': product.id})
        assert added.status_code == 201
        room_product = added.get_json()
        assert room_product['unit_price'] == '50.00'
        assert room_product['quantity'] is None

        totals = client.get(f"/api/rooms/{room['id']}").get_json()['totals']
        assert totals['total'] == '500.00'

        client.patch(f"/api/room-products/{room_product['id']}", json={'quantity': 4, 'discount': 50})
        totals = client.get(f"/api/rooms/{room['id']}").get_json()['totals']
        assert totals['total'] == '100.00'

    def test_inactive_product_cannot_be_added(self, client, session, living_room, product):
        room_id, product_id = living_room.id, product.id
        product.is_active = False
        session.commit()

        response = client.post(f'/api/rooms/{room_id}/products', json={'product_id': product_id})
        assert response.status_code == 400

    def test_phase_totals_with_excluded_variant_and_flags(self, client, session, phase, living_room):
        phase_id, variant_id = phase.id, living_room.variant_id
        other = client.post(f'/api/phases/{phase_id}/variants', json={'name': 'Вариант B'}).get_json()
        room = client.post(f"/api/variants/{other['id']}/rooms", json={'name': 'Хол', 'area': 10}).get_json()
        product_id = session.query(RoomProduct).first().product_id
        client.post(f"/api/rooms/{room['id']}/products", json={'product_id': product_id})

        client.patch(f"/api/variants/{other['id']}", json={'include_in_offer': False})
        totals = client.get(f'/api/phases/{phase_id}').get_json()['totals']
        assert totals['subtotal'] == '945.00'
        assert totals['included_variant_count'] == 1

        response = client.patch(f'/api/phases/{phase_id}', json={
            'discount_enabled': True, 'phase_discount': 10,
            'include_architect_commission': True, 'architect_commission_percent': 5,
        })
        totals = response.get_json()['totals']
        assert totals['discount_amount'] == '94.50'
        assert totals['architect_commission'] == '47.25'
        assert totals['total'] == '897.75'

        variant_totals = client.get(f'/api/variants/{variant_id}').get_json()['totals']
        assert variant_totals['total'] == '945.00'

    def test_invalid_phase_status(self, client, session, phase):
        response = client.patch(f'/api/phases/{phase.id}', json={'status': 'done'})
        assert response.status_code == 400

    def test_non_text_phase_status(self, client, session, phase):
        phase_id = phase.id
        for status in (3, True, ['won']):
            response = client.patch(f'/api/phases/{phase_id}', json={'status': status})
            assert response.status_code == 400
            assert response.get_json()['status'] == 'error'

    def test_percent_above_storable_range_is_rejected(self, client, session, living_room):
        room_id = living_room.id
        response = client.patch(f'/api/rooms/{room_id}', json={'discount': 1000})
        assert response.status_code == 400

        response = client.patch(f'/api/rooms/{room_id}', json={'waste_percent': '999.99'})
        assert response.status_code == 200
        assert response.get_json()['waste_percent'] == '999.99'


class TestRoomOperations:
    """Test clone and delete."""

    def test_clone_room_into_other_variant(self, client, session, phase, living_room):
        room_id, phase_id = living_room.id, phase.id
        target = client.post(f'/api/phases/{phase_id}/variants', json={'name': 'Вариант B'}).get_json()

        response = client.post(f'/api/rooms/{room_id}/clone', json={'target_variant_id': target['id']})
        assert response.status_code == 201
        clone = response.get_json()
        assert clone['name'] == 'Living Room (копие)'
        assert clone['variant_id'] == target['id']
        assert len(clone['products']) == 1
        assert clone['totals']['total'] == '945.00'

        assert session.query(Room).filter(Room.id == room_id).first() is not None

    def test_clone_subset_of_products(self, client, session, living_room):
        room_id = living_room.id
        response = client.post(f'/api/rooms/{room_id}/clone', json={'name': 'Празна', 'product_ids': []})
        clone = response.get_json()
        assert clone['name'] == 'Празна'
        assert clone['products'] == []
        assert clone['totals']['total'] == '0.00'

    def test_delete_room_removes_products(self, client, session, living_room):
        room_id = living_room.id
        response = client.delete(f'/api/rooms/{room_id}')
        assert response.status_code == 204

        assert session.query(Room).filter(Room.id == room_id).first() is None
        assert session.query(RoomProduct).filter(RoomProduct.room_id == room_id).count() == 0
        assert client.get(f'/api/rooms/{room_id}').status_code == 404

    def test_delete_room_product(self, client, session, living_room):
        room_id = living_room.id
        room_product_id = living_room.products[0].id

        assert client.delete(f'/api/room-products/{room_product_id}').status_code == 204
        totals = client.get(f'/api/rooms/{room_id}').get_json()['totals']
        assert totals['total'] == '0.00'


class TestApiKey:
    """Test the API key stub."""

    @pytest.fixture
    def secured(self, app):
        app.config['API_KEY'] = 'secret-key'
        yield app
        app.config['API_KEY'] = None

    def test_missing_key_is_rejected(self, client, session, secured):
        response = client.get('/api/projects')
        assert response.status_code == 401
        assert response.get_json()['status'] == 'error'

    def test_valid_key_is_accepted(self, client, session, secured):
        response = client.get('/api/projects', headers={'X-API-Key': 'secret-key'})
        assert response.status_code == 200

    def test_metrics_is_not_behind_the_key(self, client, session, secured):
        response = client.get('/metrics')
        assert response.status_code == 200
        assert b'parketsense_orders_by_status' in response.data
