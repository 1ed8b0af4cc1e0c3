"""
Project hierarchy service: clients, projects, phases, variants, rooms and room products.

Creation applies the business defaults; updates are PATCH-style (only keys
present in the payload are touched). Totals are never written here, they are
computed on read by pricing_service.
"""
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, Optional, Type

from sqlalchemy.orm import Session

from parketsense.models import Client, Project, Phase, PhaseStatus, Variant, Room, RoomProduct, Product
from parketsense.exceptions import BusinessLogicError, NotFoundError
from parketsense.services.pricing_service import to_decimal

logger = logging.getLogger(__name__)

DEFAULT_ROOM_WASTE = Decimal('10')
# Percent columns are Numeric(5, 2)
MAX_PERCENT = Decimal('999.99')


# ---------------------------------------------------------------------------
# Field converters
# ---------------------------------------------------------------------------

def _text(field: str, value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None


def _required_text(field: str, value: Any) -> str:
    text = _text(field, value)
    if not text:
        raise BusinessLogicError(f'Полето {field} е задължително.')
    return text


def _number(field: str, value: Any) -> Optional[Decimal]:
    """Optional non-negative number."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    number = to_decimal(value)
    if number is None:
        raise BusinessLogicError(f'Невалидна стойност за {field}.')
    if number < 0:
        raise BusinessLogicError(f'Стойността на {field} не може да е отрицателна.')
    return number


def _percent(field: str, value: Any) -> Optional[Decimal]:
    """Optional non-negative percentage. Values above 100 are accepted as entered, up to MAX_PERCENT."""
    number = _number(field, value)
    if number is not None and number > MAX_PERCENT:
        raise BusinessLogicError(f'Стойността на {field} не може да надвишава {MAX_PERCENT}.')
    return number


def _flag(field: str, value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def _integer(field: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BusinessLogicError(f'Невалидна стойност за {field}.')


def _phase_status(field: str, value: Any) -> str:
    allowed = [s.value for s in PhaseStatus]
    if isinstance(value, str):
        value = value.strip().lower()
    if value not in allowed:
        raise BusinessLogicError(f'Невалиден статус на етап: {value}. Позволени: {", ".join(allowed)}')
    return value


PROJECT_FIELDS = {
    'name': _required_text, 'address': _text, 'description': _text,
    'architect_commission': _percent,
}
PHASE_FIELDS = {
    'name': _required_text, 'description': _text, 'status': _phase_status,
    'phase_discount': _percent, 'discount_enabled': _flag,
    'include_architect_commission': _flag, 'architect_commission_percent': _percent,
}
VARIANT_FIELDS = {
    'name': _required_text, 'description': _text, 'variant_order': _integer,
    'designer': _text, 'architect': _text, 'architect_commission': _percent,
    'include_in_offer': _flag, 'discount_enabled': _flag, 'variant_discount': _percent,
}
ROOM_FIELDS = {
    'name': _required_text, 'area': _number, 'discount': _percent,
    'discount_enabled': _flag, 'waste_percent': _percent,
}
ROOM_PRODUCT_FIELDS = {
    'quantity': _number, 'unit_price': _number, 'discount': _percent, 'waste_percent': _percent,
}


def _convert(data: Dict[str, Any], fields: Dict[str, Callable]) -> Dict[str, Any]:
    """Convert the payload keys that are known fields; unknown keys are ignored."""
    return {name: convert(name, data[name]) for name, convert in fields.items() if name in data}


def apply_partial_update(entity: Any, data: Dict[str, Any], fields: Dict[str, Callable]) -> Any:
    """Set only the fields present in `data` on `entity`."""
    for name, value in _convert(data, fields).items():
        setattr(entity, name, value)
    return entity


def _get_or_404(session: Session, model: Type, entity_id: Any, label: str):
    entity = session.query(model).filter(model.id == entity_id).first()
    if not entity:
        raise NotFoundError(f'{label} {entity_id} не е намерен(а).')
    return entity


def _save(session: Session, entity: Any) -> Any:
    try:
        session.add(entity)
        session.commit()
    except Exception:
        session.rollback()
        raise
    return entity


# ---------------------------------------------------------------------------
# Getters
# ---------------------------------------------------------------------------

def get_project(session: Session, project_id: Any) -> Project:
    return _get_or_404(session, Project, project_id, 'Проект')


def get_phase(session: Session, phase_id: Any) -> Phase:
    return _get_or_404(session, Phase, phase_id, 'Етап')


def get_variant(session: Session, variant_id: Any) -> Variant:
    return _get_or_404(session, Variant, variant_id, 'Вариант')


def get_room(session: Session, room_id: Any) -> Room:
    return _get_or_404(session, Room, room_id, 'Стая')


def get_room_product(session: Session, room_product_id: Any) -> RoomProduct:
    return _get_or_404(session, RoomProduct, room_product_id, 'Продукт в стая')


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

def create_client(session: Session, data: Dict[str, Any]) -> Client:
    """Create a client (or an architect when is_architect is set)."""
    client = Client(
        name=_required_text('name', data.get('name')),
        email=_text('email', data.get('email')),
        phone=_text('phone', data.get('phone')),
        address=_text('address', data.get('address')),
        is_architect=_flag('is_architect', data.get('is_architect', False)),
        commission_percent=_percent('commission_percent', data.get('commission_percent')),
        notes=_text('notes', data.get('notes')),
    )
    return _save(session, client)


def create_project(session: Session, data: Dict[str, Any]) -> Project:
    """Create a project for an existing client, optionally with an architect."""
    client = _get_or_404(session, Client, data.get('client_id'), 'Клиент')
    architect = None
    if data.get('architect_id'):
        architect = _get_or_404(session, Client, data['architect_id'], 'Архитект')

    values = _convert(data, PROJECT_FIELDS)
    if 'name' not in values:
        raise BusinessLogicError('Полето name е задължително.')
    if architect is not None and values.get('architect_commission') is None:
        values['architect_commission'] = architect.commission_percent

    project = Project(client_id=client.id, architect_id=architect.id if architect else None, **values)
    return _save(session, project)


def create_phase(session: Session, project_id: Any, data: Dict[str, Any]) -> Phase:
    """
    Create a phase. Commission percent defaults to the project's architect
    commission; discount and commission start disabled.
    """
    project = get_project(session, project_id)
    values = _convert(data, PHASE_FIELDS)
    if 'name' not in values:
        raise BusinessLogicError('Полето name е задължително.')

    values.setdefault('status', PhaseStatus.CREATED.value)
    values.setdefault('discount_enabled', False)
    values.setdefault('include_architect_commission', False)
    if values.get('architect_commission_percent') is None:
        values['architect_commission_percent'] = project.architect_commission

    phase = Phase(**values)
    project.phases.append(phase)
    return _save(session, phase)


def create_variant(session: Session, phase_id: Any, data: Dict[str, Any]) -> Variant:
    """Create a variant at the end of the phase's variant order."""
    phase = get_phase(session, phase_id)
    values = _convert(data, VARIANT_FIELDS)
    if 'name' not in values:
        raise BusinessLogicError('Полето name е задължително.')

    values.setdefault('variant_order', len(phase.variants) + 1)
    values.setdefault('include_in_offer', True)
    values.setdefault('discount_enabled', True)

    variant = Variant(**values)
    phase.variants.append(variant)
    return _save(session, variant)


def create_room(session: Session, variant_id: Any, data: Dict[str, Any]) -> Room:
    """Create a room; waste defaults to 10% and the room discount starts enabled."""
    variant = get_variant(session, variant_id)
    values = _convert(data, ROOM_FIELDS)
    if 'name' not in values:
        raise BusinessLogicError('Полето name е задължително.')

    values.setdefault('discount_enabled', True)
    if values.get('waste_percent') is None:
        values['waste_percent'] = DEFAULT_ROOM_WASTE

    room = Room(**values)
    variant.rooms.append(room)
    return _save(session, room)


def add_room_product(session: Session, room_id: Any, data: Dict[str, Any]) -> RoomProduct:
    """
    Add a catalogue product to a room.

    discount, waste_percent and quantity stay unset unless given, so the
    room/variant defaults apply. unit_price defaults to the product's BGN
    sale price.
    """
    room = get_room(session, room_id)
    product = _get_or_404(session, Product, data.get('product_id'), 'Продукт')
    if not product.is_active:
        raise BusinessLogicError(f'Продукт {product.code} е неактивен.')

    values = _convert(data, ROOM_PRODUCT_FIELDS)
    if values.get('unit_price') is None:
        values['unit_price'] = product.sale_bgn

    room_product = RoomProduct(product_id=product.id, **values)
    room.products.append(room_product)
    _save(session, room_product)
    logger.info(f"Product {product.code} added to room {room.id}")
    return room_product


# ---------------------------------------------------------------------------
# Updates and deletes
# ---------------------------------------------------------------------------

def update_project(session: Session, project_id: Any, data: Dict[str, Any]) -> Project:
    return _save(session, apply_partial_update(get_project(session, project_id), data, PROJECT_FIELDS))


def update_phase(session: Session, phase_id: Any, data: Dict[str, Any]) -> Phase:
    return _save(session, apply_partial_update(get_phase(session, phase_id), data, PHASE_FIELDS))


def update_variant(session: Session, variant_id: Any, data: Dict[str, Any]) -> Variant:
    return _save(session, apply_partial_update(get_variant(session, variant_id), data, VARIANT_FIELDS))


def update_room(session: Session, room_id: Any, data: Dict[str, Any]) -> Room:
    return _save(session, apply_partial_update(get_room(session, room_id), data, ROOM_FIELDS))


def update_room_product(session: Session, room_product_id: Any, data: Dict[str, Any]) -> RoomProduct:
    room_product = get_room_product(session, room_product_id)
    return _save(session, apply_partial_update(room_product, data, ROOM_PRODUCT_FIELDS))


def _detach_and_commit(session: Session, collection: list, entity: Any) -> None:
    """Remove an entity from its owner's collection; delete-orphan deletes it."""
    try:
        collection.remove(entity)
        session.commit()
    except Exception:
        session.rollback()
        raise


def delete_room(session: Session, room_id: Any) -> None:
    """Delete a room together with its products."""
    room = get_room(session, room_id)
    _detach_and_commit(session, room.variant.rooms, room)
    logger.info(f"Room {room_id} deleted")


def delete_room_product(session: Session, room_product_id: Any) -> None:
    room_product = get_room_product(session, room_product_id)
    _detach_and_commit(session, room_product.room.products, room_product)


# ---------------------------------------------------------------------------
# Cloning
# ---------------------------------------------------------------------------

def clone_room(session: Session, room_id: Any, target_variant_id: Any = None,
               name: Optional[str] = None, product_ids: Optional[Iterable[Any]] = None) -> Room:
    """
    Copy a room, with its products, into a variant.

    Args:
        target_variant_id: destination variant (defaults to the source room's variant)
        name: name of the copy (defaults to "<name> (копие)")
        product_ids: RoomProduct ids to copy; None copies all of them
    """
    source = get_room(session, room_id)
    target = get_variant(session, target_variant_id) if target_variant_id else source.variant
    selected = None if product_ids is None else {int(pid) for pid in product_ids}

    try:
        copy = Room(
            name=(name or '').strip() or f'{source.name} (копие)',
            area=source.area,
            discount=source.discount,
            discount_enabled=source.discount_enabled,
            waste_percent=source.waste_percent,
        )
        for room_product in source.products:
            if selected is not None and room_product.id not in selected:
                continue
            copy.products.append(RoomProduct(
                product_id=room_product.product_id,
                quantity=room_product.quantity,
                unit_price=room_product.unit_price,
                discount=room_product.discount,
                waste_percent=room_product.waste_percent,
            ))
        target.rooms.append(copy)
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info(f"Room {source.id} cloned into variant {target.id} as room {copy.id}")
    return copy
