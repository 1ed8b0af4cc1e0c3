"""Request helpers shared by the JSON blueprints."""
from typing import Any, Dict
from flask import request
from parketsense.exceptions import BusinessLogicError


def json_payload() -> Dict[str, Any]:
    """Request body as a dict. An empty body is {}; anything but a JSON object is rejected."""
    if not request.get_data():
        return {}
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BusinessLogicError('Тялото на заявката трябва да е JSON обект.')
    return data
