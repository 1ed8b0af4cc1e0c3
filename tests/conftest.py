import pytest
from decimal import Decimal
import uuid

from parketsense import create_app
from parketsense.database import Base, create_schema, get_session
from parketsense.models import Client, Project, Phase, Variant, Room, RoomProduct, Product, Order


@pytest.fixture(scope='session')
def app():
    """Create application instance for testing (in-memory SQLite)."""
    app = create_app('config.TestConfig')
    create_schema()
    return app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Database session; every table is emptied after the test."""
    session = get_session()
    yield session
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.remove()


@pytest.fixture(scope='function')
def customer(session):
    """Create test client (customer)."""
    suffix = str(uuid.uuid4())[:8]
    customer = Client(name=f'Клиент {suffix}', email=f'client-{suffix}@test.bg')
    session.add(customer)
    session.commit()
    return customer


@pytest.fixture(scope='function')
def product(session):
    """Create test catalogue product with a BGN sale price of 50."""
    suffix = str(uuid.uuid4())[:8]
    product = Product(
        code=f'OAK-{suffix}',
        name_bg=f'Дъб {suffix}',
        name_en=f'Oak {suffix}',
        supplier='Parador',
        cost_bgn=Decimal('35'),
        cost_eur=Decimal('17.89'),
        sale_bgn=Decimal('50'),
        sale_eur=Decimal('25.56'),
        markup=Decimal('30'),
        is_active=True
    )
    session.add(product)
    session.commit()
    return product


@pytest.fixture(scope='function')
def project(session, customer):
    """Create test project for the customer."""
    project = Project(name='Апартамент Лозенец', client_id=customer.id)
    customer.projects.append(project)
    session.commit()
    return project


@pytest.fixture(scope='function')
def phase(session, project):
    """Create test phase (discount and commission off)."""
    phase = Phase(name='Етап 1', status='created', discount_enabled=False, include_architect_commission=False)
    project.phases.append(phase)
    session.commit()
    return phase


@pytest.fixture(scope='function')
def variant(session, phase):
    """Create test variant included in the offer."""
    variant = Variant(name='Вариант A', variant_order=1, include_in_offer=True, discount_enabled=True)
    phase.variants.append(variant)
    session.commit()
    return variant


@pytest.fixture(scope='function')
def living_room(session, variant, product):
    """
    Room "Living Room": area 20, discount 10, waste 5, one product at 50
    with no overrides. Its line total is 945.
    """
    room = Room(name='Living Room', area=Decimal('20'), discount=Decimal('10'),
                discount_enabled=True, waste_percent=Decimal('5'))
    room.products.append(RoomProduct(product_id=product.id, unit_price=Decimal('50')))
    variant.rooms.append(room)
    session.commit()
    return room


@pytest.fixture(scope='function')
def order(session):
    """Create test order worth 1000 BGN with every sub-status at its initial value."""
    suffix = str(uuid.uuid4())[:8]
    order = Order(
        order_number=f'ORD-TEST-{suffix}',
        project_name='Апартамент Лозенец',
        client_name='Иван Петров',
        supplier='Parador',
        total_amount=Decimal('1000'),
        paid_amount=Decimal('0'),
        currency='BGN',
        confirmation_status='pending',
        payment_status='unpaid',
        delivery_status='pending'
    )
    session.add(order)
    session.commit()
    return order
