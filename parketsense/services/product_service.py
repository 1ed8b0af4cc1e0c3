"""Product catalogue service: creation with currency back-fill and sale price derivation."""
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from parketsense.models import Product
from parketsense.exceptions import BusinessLogicError, ConflictError
from parketsense.services.pricing_service import to_decimal

logger = logging.getLogger(__name__)

# Fixed EUR -> BGN rate. Only used to back-fill a missing currency at creation.
EUR_TO_BGN_RATE = Decimal('1.956')
DEFAULT_MARKUP = Decimal('30')


def eur_to_bgn(amount: Decimal) -> Decimal:
    return amount * EUR_TO_BGN_RATE


def bgn_to_eur(amount: Decimal) -> Decimal:
    return amount / EUR_TO_BGN_RATE


def calculate_sale_price(cost: Decimal, markup: Decimal) -> Decimal:
    """
    Sale price from cost with a margin on the sale price.

        sale = cost / ((100 - markup) / 100)

    A 30% markup on a cost of 70 gives a sale price of 100 (not 91).
    """
    if markup >= 100:
        raise BusinessLogicError('Надценката трябва да е под 100%.')
    return cost / ((Decimal('100') - markup) / Decimal('100'))


def resolve_product_prices(data: Dict[str, Any], default_markup: Optional[Any] = None) -> Dict[str, Decimal]:
    """
    Fill in whichever of cost/sale BGN/EUR were not provided.

    A missing (or zero) cost in one currency is converted from the other at
    EUR_TO_BGN_RATE. A missing sale price is derived from the cost of the
    same currency with calculate_sale_price. Explicit values always win.
    """
    cost_bgn = to_decimal(data.get('cost_bgn')) or Decimal('0')
    cost_eur = to_decimal(data.get('cost_eur')) or Decimal('0')
    markup = to_decimal(data.get('markup'))
    if markup is None:
        markup = to_decimal(default_markup)
    if markup is None:
        markup = DEFAULT_MARKUP

    if not cost_bgn and cost_eur:
        cost_bgn = eur_to_bgn(cost_eur)
    if not cost_eur and cost_bgn:
        cost_eur = bgn_to_eur(cost_bgn)

    sale_bgn = to_decimal(data.get('sale_bgn')) or Decimal('0')
    sale_eur = to_decimal(data.get('sale_eur')) or Decimal('0')

    if not sale_bgn and cost_bgn > 0:
        sale_bgn = calculate_sale_price(cost_bgn, markup)
    if not sale_eur and cost_eur > 0:
        sale_eur = calculate_sale_price(cost_eur, markup)

    return {
        'cost_bgn': cost_bgn,
        'cost_eur': cost_eur,
        'sale_bgn': sale_bgn,
        'sale_eur': sale_eur,
        'markup': markup,
    }


def create_product(session: Session, data: Dict[str, Any], default_markup: Optional[Any] = None) -> Product:
    """Create a catalogue product. The product code must be unique."""
    code = (data.get('code') or '').strip()
    name_bg = (data.get('name_bg') or '').strip()
    if not code:
        raise BusinessLogicError('Кодът на продукта е задължителен.')
    if not name_bg:
        raise BusinessLogicError('Името на продукта е задължително.')

    if session.query(Product).filter(Product.code == code).first():
        raise ConflictError(f'Продукт с код {code} вече съществува.')

    prices = resolve_product_prices(data, default_markup)

    try:
        product = Product(
            code=code,
            name_bg=name_bg,
            name_en=(data.get('name_en') or '').strip() or name_bg,
            supplier=(data.get('supplier') or '').strip() or None,
            unit=(data.get('unit') or '').strip() or 'm2',
            package_size=data.get('package_size'),
            is_active=data.get('is_active') is not False,
            **prices
        )
        session.add(product)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"Product created: {product.code} (sale_bgn={product.sale_bgn}, markup={product.markup})")
    return product
