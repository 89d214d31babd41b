"""Request helpers shared by the blueprints."""

from flask import current_app, request
from api import SERVICES_KEY
from errors import AuthError


def get_services():
    """Return the Services container bound to the running app."""
    return current_app.extensions[SERVICES_KEY]


def current_user_id() -> int:
    """Read the caller's identity from the ``user_id`` query parameter.

    The login token is not checked; any positive integer is accepted as the
    caller's identity.

    Raises:
        AuthError: If user_id is missing or not a positive integer.
    """
    raw = request.args.get("user_id", "").strip()
    try:
        user_id = int(raw)
    except ValueError:
        raise AuthError("未授权访问") from None

    if user_id <= 0:
        raise AuthError("未授权访问")
    return user_id
