"""
Flask CLI commands.

Commands:
- flask init-db: Create all tables
- flask seed-demo: Load a demo project and sample orders
"""

import click
from parketsense.database import create_schema, get_session
from parketsense.models import Product, StatusType
from parketsense.services import project_service, order_service
from parketsense.services.product_service import create_product
from parketsense.services.pricing_service import calculate_phase_total, round_money

DEMO_PRODUCT_CODE = 'DEMO-OAK-01'

# (supplier, confirmation, payment, delivery)
DEMO_ORDERS = [
    ('Parador', 'pending', 'unpaid', 'pending'),
    ('Parador', 'confirmed', 'unpaid', 'delivered'),
    ('Boen', 'confirmed', 'partial', 'pending'),
    ('Boen', 'confirmed', 'paid', 'pending'),
    ('Kährs', 'confirmed', 'paid', 'in_transit'),
    ('Kährs', 'confirmed', 'paid', 'delivered'),
]


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-db')
    def init_db_command():
        """Create every table."""
        create_schema()
        click.echo(click.style('Database tables created.', fg='green'))

    @app.cli.command('seed-demo')
    def seed_demo():
        """Create a demo client, project, phase, variant and room plus sample orders."""
        session = get_session()

        if session.query(Product).filter(Product.code == DEMO_PRODUCT_CODE).first():
            click.echo(click.style('Demo data already present, nothing to do.', fg='yellow'))
            return

        product = create_product(session, {
            'code': DEMO_PRODUCT_CODE,
            'name_bg': 'Дъб натур, трислоен паркет',
            'name_en': 'Natural oak, engineered',
            'supplier': 'Parador',
            'cost_bgn': '35',
            'sale_bgn': '50',
        }, app.config.get('DEFAULT_MARKUP'))

        client = project_service.create_client(session, {'name': 'Демо клиент', 'phone': '+359 888 000 000'})
        project = project_service.create_project(session, {
            'client_id': client.id,
            'name': 'Демо апартамент',
            'address': 'София, ул. Примерна 1',
        })
        phase = project_service.create_phase(session, project.id, {'name': 'Етап 1'})
        variant = project_service.create_variant(session, phase.id, {'name': 'Вариант A'})
        room = project_service.create_room(session, variant.id, {
            'name': 'Living Room',
            'area': '20',
            'discount': '10',
            'discount_enabled': True,
            'waste_percent': '5',
        })
        project_service.add_room_product(session, room.id, {'product_id': product.id})

        totals = calculate_phase_total(phase)
        click.echo(f'Demo phase total: {round_money(totals["total"])} BGN')

        for supplier, confirmation, payment, delivery in DEMO_ORDERS:
            order = order_service.create_order(session, {'variant_id': variant.id, 'supplier': supplier})
            for status_type, value in ((StatusType.CONFIRMATION, confirmation),
                                       (StatusType.PAYMENT, payment),
                                       (StatusType.DELIVERY, delivery)):
                if getattr(order, f'{status_type.value}_status') != value:
                    order_service.update_order_status(session, order.id, status_type, value, notes='demo')

        click.echo(click.style(f'Demo data created ({len(DEMO_ORDERS)} orders).', fg='green'))
