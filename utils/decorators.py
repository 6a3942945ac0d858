from __future__ import annotations
from functools import wraps
from flask import request, g
from services.session import get_session_service


def jwt_required():
    """
    Require a valid access token in `Authorization: Bearer <token>`.
    Failures raise AuthError subclasses, rendered by api.errors as 401s.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_user_id = get_session_service().authenticate(request.headers)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
