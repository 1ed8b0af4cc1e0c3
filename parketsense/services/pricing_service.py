"""
Price roll-up for room products, rooms, variants and phases.

Every function here is a pure read-and-compute step over records that come
either from the ORM (Room, Variant, ...) or from plain dicts with the same
snake_case field names. Nothing is written back and nothing is cached; the
totals are recomputed on every call.

Per line item, in this order:

    quantity_after_waste      = quantity * (1 + waste_percent / 100)
    unit_price_after_discount = unit_price * (1 - discount / 100)
    line_total                = quantity_after_waste * unit_price_after_discount

Waste inflates the billed quantity, discount reduces the unit price. All
arithmetic is Decimal and nothing is rounded until display (see round_money).
Percentages are not clamped to [0, 100]: a 150% discount yields a negative
price, exactly as entered.
"""
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

ZERO = Decimal('0')
ONE = Decimal('1')
HUNDRED = Decimal('100')
CENT = Decimal('0.01')


def _read(record: Any, name: str, default: Any = None) -> Any:
    """Read a field from an ORM object or a plain dict."""
    if record is None:
        return default
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a raw numeric value to Decimal.

    Returns None for missing, blank, non-numeric, NaN or infinite input so
    that callers can tell "not set" apart from zero.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    else:
        if isinstance(value, str) and not value.strip():
            return None
        try:
            number = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError):
            return None
    if not number.is_finite():
        return None
    return number


def _non_negative(value: Any) -> Optional[Decimal]:
    """Like to_decimal, but a negative number counts as 0."""
    number = to_decimal(value)
    if number is None:
        return None
    return number if number >= 0 else ZERO


def resolve_effective(product_value: Any, room_value: Any, variant_value: Any, default: Any) -> Any:
    """
    Resolve a value that can be set at product, room or variant level.

    Precedence is product -> room -> variant -> default; the first value
    that is not None wins (0 is a real value and wins too).
    """
    for value in (product_value, room_value, variant_value):
        if value is not None:
            return value
    return default


def _room_discount(room: Any) -> Optional[Decimal]:
    if room is None or _read(room, 'discount_enabled', True) is False:
        return None
    return _non_negative(_read(room, 'discount'))


def _variant_discount(variant: Any) -> Optional[Decimal]:
    if variant is None or _read(variant, 'discount_enabled', True) is False:
        return None
    return _non_negative(_read(variant, 'variant_discount'))


def effective_discount(room_product: Any, room: Any = None, variant: Any = None) -> Decimal:
    """Discount percent for a line: product override, else room, else variant, else 0."""
    return resolve_effective(
        _non_negative(_read(room_product, 'discount')),
        _room_discount(room),
        _variant_discount(variant),
        ZERO,
    )


def effective_waste(room_product: Any, room: Any = None) -> Decimal:
    """Waste percent for a line: product override, else room, else 0."""
    return resolve_effective(
        _non_negative(_read(room_product, 'waste_percent')),
        _non_negative(_read(room, 'waste_percent')),
        None,
        ZERO,
    )


def effective_quantity(room_product: Any, room: Any = None) -> Decimal:
    """Billed base quantity: the product's own, else the room area, else 0."""
    return resolve_effective(
        _non_negative(_read(room_product, 'quantity')),
        _non_negative(_read(room, 'area')),
        None,
        ZERO,
    )


def calculate_line(room_product: Any, room: Any = None, variant: Any = None) -> Dict[str, Any]:
    """
    Compute one room product line.

    Args:
        room_product: RoomProduct or dict (quantity, unit_price, discount, waste_percent)
        room: owning Room or dict, used for defaults
        variant: owning Variant or dict, used for the discount fallback

    Returns:
        Dict with the resolved inputs and every pipeline step as Decimal.
    """
    quantity = effective_quantity(room_product, room)
    waste_percent = effective_waste(room_product, room)
    discount = effective_discount(room_product, room, variant)
    unit_price = _non_negative(_read(room_product, 'unit_price')) or ZERO

    quantity_after_waste = quantity * (ONE + waste_percent / HUNDRED)
    unit_price_after_discount = unit_price * (ONE - discount / HUNDRED)
    line_total = quantity_after_waste * unit_price_after_discount

    return {
        'id': _read(room_product, 'id'),
        'product_id': _read(room_product, 'product_id'),
        'quantity': quantity,
        'waste_percent': waste_percent,
        'quantity_after_waste': quantity_after_waste,
        'unit_price': unit_price,
        'discount': discount,
        'unit_price_after_discount': unit_price_after_discount,
        'line_total': line_total,
    }


def calculate_room_total(room: Any, variant: Any = None) -> Dict[str, Any]:
    """Sum every product line of a room."""
    lines = [calculate_line(rp, room, variant) for rp in (_read(room, 'products') or [])]

    return {
        'id': _read(room, 'id'),
        'name': _read(room, 'name'),
        'area': _non_negative(_read(room, 'area')) or ZERO,
        'products': lines,
        'product_count': len(lines),
        'quantity_total': sum((line['quantity_after_waste'] for line in lines), ZERO),
        'total': sum((line['line_total'] for line in lines), ZERO),
    }


def calculate_variant_total(variant: Any) -> Dict[str, Any]:
    """
    Sum the rooms of a variant.

    Computed the same way whether or not the variant is included in the
    offer; inclusion only matters in calculate_phase_total. The architect
    commission reported here is the variant's own percentage, for display.
    """
    rooms = [calculate_room_total(room, variant) for room in (_read(variant, 'rooms') or [])]
    total = sum((room['total'] for room in rooms), ZERO)
    commission_percent = _non_negative(_read(variant, 'architect_commission')) or ZERO

    return {
        'id': _read(variant, 'id'),
        'name': _read(variant, 'name'),
        'include_in_offer': _read(variant, 'include_in_offer', True) is not False,
        'rooms': rooms,
        'room_count': len(rooms),
        'total': total,
        'architect_commission_percent': commission_percent,
        'architect_commission': total * commission_percent / HUNDRED,
    }


def calculate_phase_total(phase: Any) -> Dict[str, Any]:
    """
    Aggregate the included variants of a phase into offer totals.

    subtotal            = sum of variants with include_in_offer
    architect_commission = subtotal * percent / 100  (pre-discount subtotal)
    discount_amount     = subtotal * phase_discount / 100
    total               = subtotal - discount_amount + architect_commission

    Commission only when include_architect_commission is set, discount only
    when discount_enabled is set.
    """
    variants = [calculate_variant_total(v) for v in (_read(phase, 'variants') or [])]
    included = [v for v in variants if v['include_in_offer']]
    subtotal = sum((v['total'] for v in included), ZERO)

    commission_percent = ZERO
    if _read(phase, 'include_architect_commission', False):
        commission_percent = _non_negative(_read(phase, 'architect_commission_percent')) or ZERO
    architect_commission = subtotal * commission_percent / HUNDRED

    discount_percent = ZERO
    if _read(phase, 'discount_enabled', False):
        discount_percent = _non_negative(_read(phase, 'phase_discount')) or ZERO
    discount_amount = subtotal * discount_percent / HUNDRED

    total = subtotal - discount_amount + architect_commission

    logger.debug(
        f"Phase {_read(phase, 'id')} totals: {len(included)}/{len(variants)} variants, "
        f"subtotal={subtotal}, total={total}"
    )

    return {
        'id': _read(phase, 'id'),
        'name': _read(phase, 'name'),
        'variants': variants,
        'variant_count': len(variants),
        'included_variant_count': len(included),
        'subtotal': subtotal,
        'discount_percent': discount_percent,
        'discount_amount': discount_amount,
        'architect_commission_percent': commission_percent,
        'architect_commission': architect_commission,
        'total': total,
    }


def round_money(value: Any) -> Decimal:
    """Round a computed amount to cents for display (half up). Non-numeric -> 0.00."""
    number = to_decimal(value)
    if number is None:
        number = ZERO
    return number.quantize(CENT, rounding=ROUND_HALF_UP)
