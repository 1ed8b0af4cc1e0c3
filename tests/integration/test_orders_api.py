"""
Integration tests for orders: creation, sub-status changes, payments and the status filter.
"""

from datetime import date
from decimal import Decimal
from parketsense.models import Order, OrderStatusHistory
from parketsense.services import order_service


class TestOrderCreation:
    """Test order creation and numbering."""

    def test_create_with_explicit_total(self, client, session):
        response = client.post('/api/orders', json={
            'total_amount': '1200.5', 'supplier': 'Boen', 'client_name': 'Иван Петров',
        })
        assert response.status_code == 201
        data = response.get_json()

        assert data['order_number'] == f'ORD-{date.today().year}-000001'
        assert data['total_amount'] == '1200.50'
        assert data['paid_amount'] == '0.00'
        assert data['confirmation_status'] == 'pending'
        assert data['payment_status'] == 'unpaid'
        assert data['delivery_status'] == 'pending'
        assert data['overall_status']['status'] == 'UNCONFIRMED'
        assert data['total_display'] == '1200,50 лв.'

    def test_numbers_increase(self, client, session):
        client.post('/api/orders', json={'total_amount': 10})
        second = client.post('/api/orders', json={'total_amount': 20}).get_json()
        assert second['order_number'].endswith('-000002')

    def test_create_from_variant_takes_variant_total(self, client, session, living_room, project):
        variant_id = living_room.variant_id
        project_name, client_name = project.name, project.client.name

        response = client.post('/api/orders', json={'variant_id': variant_id, 'supplier': 'Parador'})
        assert response.status_code == 201
        data = response.get_json()
        assert data['total_amount'] == '945.00'
        assert data['project_name'] == project_name
        assert data['client_name'] == client_name

    def test_missing_total_is_rejected(self, client, session):
        assert client.post('/api/orders', json={'supplier': 'Boen'}).status_code == 400

    def test_negative_total_is_rejected(self, client, session):
        assert client.post('/api/orders', json={'total_amount': -1}).status_code == 400

    def test_bad_date_is_rejected(self, client, session):
        response = client.post('/api/orders', json={'total_amount': 10, 'order_date': '20.06.2025'})
        assert response.status_code == 400


class TestStatusChanges:
    """Test sub-status updates and the derived overall status."""

    def test_status_walk(self, client, session, order):
        order_id = order.id

        steps = [
            ('confirmation', 'confirmed', 'UNPAID'),
            ('payment', 'partial', 'PARTIALLY_PAID'),
            ('payment', 'paid', 'AWAITING_DELIVERY'),
            ('delivery', 'in_transit', 'IN_DELIVERY'),
            ('delivery', 'delivered', 'DELIVERED'),
        ]
        for status_type, status, expected in steps:
            response = client.patch(f'/api/orders/{order_id}/status', json={
                'status_type': status_type, 'status': status,
            })
            assert response.status_code == 200
            data = response.get_json()
            assert data['overall_status']['status'] == expected
            assert data['last_status_type'] == status_type

    def test_unpaid_order_never_shows_delivery(self, client, session, order):
        order_id = order.id
        client.patch(f'/api/orders/{order_id}/status', json={'status_type': 'confirmation', 'status': 'confirmed'})
        response = client.patch(f'/api/orders/{order_id}/status', json={
            'status_type': 'delivery', 'status': 'delivered',
        })
        assert response.get_json()['overall_status']['status'] == 'UNPAID'

    def test_history_is_recorded(self, client, session, order):
        order_id = order.id
        client.patch(f'/api/orders/{order_id}/status', json={
            'status_type': 'confirmation', 'status': 'confirmed', 'notes': 'Потвърдено по телефона',
        })

        history = client.get(f'/api/orders/{order_id}/history').get_json()['history']
        assert len(history) == 1
        assert history[0]['status_type'] == 'confirmation'
        assert history[0]['old_status'] == 'pending'
        assert history[0]['new_status'] == 'confirmed'
        assert history[0]['notes'] == 'Потвърдено по телефона'

    def test_invalid_status_type(self, client, session, order):
        response = client.patch(f'/api/orders/{order.id}/status', json={'status_type': 'shipping', 'status': 'x'})
        assert response.status_code == 400

    def test_invalid_status_value(self, client, session, order):
        order_id = order.id
        response = client.patch(f'/api/orders/{order_id}/status', json={'status_type': 'payment', 'status': 'refunded'})
        assert response.status_code == 400
        assert session.query(OrderStatusHistory).filter(OrderStatusHistory.order_id == order_id).count() == 0

    def test_unknown_order(self, client, session):
        response = client.patch('/api/orders/999999/status', json={'status_type': 'payment', 'status': 'paid'})
        assert response.status_code == 404

    def test_service_accepts_enum_members(self, session, order):
        from parketsense.models import StatusType, ConfirmationStatus
        updated = order_service.update_order_status(
            session, order.id, StatusType.CONFIRMATION, ConfirmationStatus.REJECTED
        )
        assert updated.confirmation_status == 'rejected'


class TestPayments:
    """Test payments moving the payment status."""

    def test_partial_then_full_payment(self, client, session, order):
        order_id = order.id

        response = client.post(f'/api/orders/{order_id}/payments', json={'amount': 400})
        assert response.status_code == 201
        data = response.get_json()
        assert data['payment']['amount'] == '400.00'
        assert data['order']['payment_status'] == 'partial'
        assert data['order']['paid_amount'] == '400.00'
        assert data['order']['amount_due'] == '600.00'

        data = client.post(f'/api/orders/{order_id}/payments', json={
            'amount': '600', 'payment_type': 'final', 'reference_number': 'PN-17',
        }).get_json()
        assert data['order']['payment_status'] == 'paid'
        assert data['order']['amount_due'] == '0.00'

        detail = client.get(f'/api/orders/{order_id}').get_json()
        assert [p['amount'] for p in detail['payments']] == ['400.00', '600.00']

        history = client.get(f'/api/orders/{order_id}/history').get_json()['history']
        assert [h['new_status'] for h in history] == ['partial', 'paid']

    def test_non_positive_payment_is_rejected(self, client, session, order):
        order_id = order.id
        assert client.post(f'/api/orders/{order_id}/payments', json={'amount': 0}).status_code == 400
        assert client.post(f'/api/orders/{order_id}/payments', json={'amount': 'abc'}).status_code == 400

        stored = session.query(Order).filter(Order.id == order_id).first()
        assert stored.paid_amount == Decimal('0')


class TestOrderList:
    """Test listing, filters and counts."""

    def _make(self, session, number, supplier, confirmation, payment, delivery, client_name='Клиент'):
        session.add(Order(
            order_number=number, supplier=supplier, client_name=client_name,
            project_name='Проект', total_amount=Decimal('100'), paid_amount=Decimal('0'),
            confirmation_status=confirmation, payment_status=payment, delivery_status=delivery,
        ))
        session.commit()

    def test_filters_and_counts(self, client, session):
        self._make(session, 'ORD-L-1', 'Parador', 'pending', 'unpaid', 'pending')
        self._make(session, 'ORD-L-2', 'Parador', 'confirmed', 'unpaid', 'delivered')
        self._make(session, 'ORD-L-3', 'Boen', 'confirmed', 'paid', 'pending', client_name='Георги Димитров')
        self._make(session, 'ORD-L-4', 'Boen', 'confirmed', 'paid', 'delivered')

        data = client.get('/api/orders').get_json()
        assert len(data['orders']) == 4
        assert data['counts']['UNCONFIRMED'] == 1
        assert data['counts']['UNPAID'] == 1
        assert data['counts']['AWAITING_DELIVERY'] == 1
        assert data['counts']['DELIVERED'] == 1
        assert data['suppliers'] == ['Boen', 'Parador']
        assert len(data['statuses']) == 7

        data = client.get('/api/orders?status=UNPAID').get_json()
        assert [o['order_number'] for o in data['orders']] == ['ORD-L-2']

        data = client.get('/api/orders', query_string={'status': 'ДОСТАВЕНА'}).get_json()
        assert [o['order_number'] for o in data['orders']] == ['ORD-L-4']

        data = client.get('/api/orders?supplier=Boen').get_json()
        assert {o['order_number'] for o in data['orders']} == {'ORD-L-3', 'ORD-L-4'}
        assert data['counts']['UNCONFIRMED'] == 0

        data = client.get('/api/orders', query_string={'q': 'Георги'}).get_json()
        assert [o['order_number'] for o in data['orders']] == ['ORD-L-3']

        data = client.get('/api/orders?status=all&supplier=all').get_json()
        assert len(data['orders']) == 4

    def test_metrics_count_orders(self, client, session):
        self._make(session, 'ORD-M-1', 'Parador', 'confirmed', 'partial', 'pending')
        body = client.get('/metrics').data.decode('utf-8')
        assert 'parketsense_orders_by_status{status="PARTIALLY_PAID"} 1.0' in body
