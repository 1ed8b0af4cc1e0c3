"""JSON serialization of models and computed summaries."""
from decimal import Decimal
from typing import Any, Dict, Optional

from parketsense.services.pricing_service import round_money
from parketsense.services.order_status_service import resolve_overall_status
from parketsense.utils.formatters import money_bg, date_bg

# Keys of computed summaries that hold money (rounded to cents on output)
MONEY_KEYS = frozenset([
    'unit_price', 'unit_price_after_discount', 'line_total',
    'total', 'subtotal', 'discount_amount', 'architect_commission',
])


def money(value: Any) -> str:
    """Money as a string with exactly two decimals, e.g. '880.00'."""
    return str(round_money(value))


def number(value: Optional[Decimal]) -> Optional[str]:
    """Non-money Decimal as a plain string without trailing zeros ('20.000' -> '20')."""
    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return format(value.normalize(), 'f')


def _isoformat(value: Any) -> Optional[str]:
    return value.isoformat() if value is not None else None


def serialize_summary(summary: Any) -> Any:
    """
    Convert a pricing summary (nested dicts/lists of Decimals) to JSON values.

    Money keys are rounded half up to cents; every dict that has a total also
    gets a bg-BG formatted `total_display`.
    """
    if isinstance(summary, list):
        return [serialize_summary(item) for item in summary]
    if not isinstance(summary, dict):
        return number(summary) if isinstance(summary, Decimal) else summary

    result = {}
    for key, value in summary.items():
        if key in MONEY_KEYS:
            result[key] = money(value)
        else:
            result[key] = serialize_summary(value)
    if 'total' in summary:
        result['total_display'] = money_bg(round_money(summary['total']))
    return result


def serialize_client(client) -> Dict[str, Any]:
    return {
        'id': client.id,
        'name': client.name,
        'email': client.email,
        'phone': client.phone,
        'address': client.address,
        'is_architect': client.is_architect,
        'commission_percent': number(client.commission_percent),
        'notes': client.notes,
    }


def serialize_project(project) -> Dict[str, Any]:
    return {
        'id': project.id,
        'name': project.name,
        'client_id': project.client_id,
        'client_name': project.client.name if project.client else None,
        'architect_id': project.architect_id,
        'address': project.address,
        'description': project.description,
        'architect_commission': number(project.architect_commission),
        'phases': [{'id': phase.id, 'name': phase.name, 'status': phase.status} for phase in project.phases],
    }


def serialize_phase(phase) -> Dict[str, Any]:
    return {
        'id': phase.id,
        'project_id': phase.project_id,
        'name': phase.name,
        'description': phase.description,
        'status': phase.status,
        'phase_discount': number(phase.phase_discount),
        'discount_enabled': phase.discount_enabled,
        'include_architect_commission': phase.include_architect_commission,
        'architect_commission_percent': number(phase.architect_commission_percent),
    }


def serialize_variant(variant) -> Dict[str, Any]:
    return {
        'id': variant.id,
        'phase_id': variant.phase_id,
        'name': variant.name,
        'description': variant.description,
        'variant_order': variant.variant_order,
        'designer': variant.designer,
        'architect': variant.architect,
        'architect_commission': number(variant.architect_commission),
        'include_in_offer': variant.include_in_offer,
        'discount_enabled': variant.discount_enabled,
        'variant_discount': number(variant.variant_discount),
    }


def serialize_room(room) -> Dict[str, Any]:
    return {
        'id': room.id,
        'variant_id': room.variant_id,
        'name': room.name,
        'area': number(room.area),
        'discount': number(room.discount),
        'discount_enabled': room.discount_enabled,
        'waste_percent': number(room.waste_percent),
        'products': [serialize_room_product(rp) for rp in room.products],
    }


def serialize_room_product(room_product) -> Dict[str, Any]:
    product = room_product.product
    return {
        'id': room_product.id,
        'room_id': room_product.room_id,
        'product_id': room_product.product_id,
        'product_code': product.code if product else None,
        'product_name': product.name_bg if product else None,
        'quantity': number(room_product.quantity),
        'unit_price': money(room_product.unit_price) if room_product.unit_price is not None else None,
        'discount': number(room_product.discount),
        'waste_percent': number(room_product.waste_percent),
    }


def serialize_product(product) -> Dict[str, Any]:
    return {
        'id': product.id,
        'code': product.code,
        'name_bg': product.name_bg,
        'name_en': product.name_en,
        'supplier': product.supplier,
        'unit': product.unit,
        'package_size': product.package_size,
        'cost_bgn': money(product.cost_bgn),
        'cost_eur': money(product.cost_eur),
        'sale_bgn': money(product.sale_bgn),
        'sale_eur': money(product.sale_eur),
        'markup': number(product.markup),
        'is_active': product.is_active,
    }


def serialize_offer(offer) -> Dict[str, Any]:
    return {
        'id': offer.id,
        'phase_id': offer.phase_id,
        'offer_number': offer.offer_number,
        'status': offer.status,
        'currency': offer.currency,
        'subtotal': money(offer.subtotal_amount),
        'discount_amount': money(offer.discount_amount),
        'architect_commission': money(offer.commission_amount),
        'total': money(offer.total_amount),
        'total_display': money_bg(offer.total_amount, offer.currency),
        'valid_until': _isoformat(offer.valid_until),
        'valid_until_display': date_bg(offer.valid_until),
        'is_expired': offer.is_expired,
        'notes': offer.notes,
    }


def serialize_order(order) -> Dict[str, Any]:
    return {
        'id': order.id,
        'order_number': order.order_number,
        'variant_id': order.variant_id,
        'project_name': order.project_name,
        'client_name': order.client_name,
        'supplier': order.supplier,
        'order_date': _isoformat(order.order_date),
        'order_date_display': date_bg(order.order_date),
        'expected_delivery_date': _isoformat(order.expected_delivery_date),
        'total_amount': money(order.total_amount),
        'paid_amount': money(order.paid_amount),
        'amount_due': money(order.amount_due),
        'total_display': money_bg(order.total_amount, order.currency),
        'currency': order.currency,
        'confirmation_status': order.confirmation_status,
        'payment_status': order.payment_status,
        'delivery_status': order.delivery_status,
        'overall_status': resolve_overall_status(order),
        'last_status_type': order.last_status_type,
        'last_status_update': _isoformat(order.last_status_update),
        'notes': order.notes,
    }


def serialize_payment(payment) -> Dict[str, Any]:
    return {
        'id': payment.id,
        'order_id': payment.order_id,
        'amount': money(payment.amount),
        'payment_type': payment.payment_type,
        'payment_date': _isoformat(payment.payment_date),
        'reference_number': payment.reference_number,
        'notes': payment.notes,
    }


def serialize_history(entry) -> Dict[str, Any]:
    return {
        'id': entry.id,
        'status_type': entry.status_type,
        'old_status': entry.old_status,
        'new_status': entry.new_status,
        'notes': entry.notes,
        'changed_at': _isoformat(entry.changed_at),
    }


def serialize_architect_payment(payment) -> Dict[str, Any]:
    return {
        'id': payment.id,
        'phase_id': payment.phase_id,
        'amount': money(payment.amount),
        'amount_display': money_bg(payment.amount),
        'payment_date': _isoformat(payment.payment_date),
        'payment_date_display': date_bg(payment.payment_date),
        'status': payment.status,
        'payment_method': payment.payment_method,
        'reference_number': payment.reference_number,
        'description': payment.description,
    }


COMMISSION_MONEY_KEYS = frozenset([
    'total_phase_value', 'expected_commission', 'paid_amount', 'pending_amount', 'remaining_amount',
    'total_expected_commission', 'total_paid_amount', 'total_pending_amount', 'total_remaining_amount',
])


def serialize_commission_stats(stats: Dict[str, Any]) -> Dict[str, Any]:
    """Commission stats (phase or project level) with money rounded to cents."""
    result = {}
    for key, value in stats.items():
        if key in COMMISSION_MONEY_KEYS:
            result[key] = money(value)
        elif key == 'phases':
            result[key] = [serialize_commission_stats(phase) for phase in value]
        elif isinstance(value, Decimal):
            result[key] = number(value)
        else:
            result[key] = value
    return result
