"""Middleware for the API key authentication stub."""
import hmac
from flask import current_app, request
from parketsense.exceptions import UnauthorizedError


def check_api_key():
    """
    Verify the X-API-Key header against the configured API_KEY.

    When no API_KEY is configured the API stays open (development stub).
    """
    expected = current_app.config.get('API_KEY')
    if not expected:
        return
    provided = request.headers.get('X-API-Key', '')
    if not hmac.compare_digest(provided.encode('utf-8'), expected.encode('utf-8')):
        current_app.logger.warning(f"Rejected API request to {request.path}: bad or missing API key")
        raise UnauthorizedError('Невалиден или липсващ API ключ.')
