"""
Payment provider (Polka) webhook.
Trusted by shared API key only, independent of user sessions.
"""
from __future__ import annotations

import hmac
import logging
import uuid

from flask import Blueprint, request, abort, current_app

from models import storage
from models.user import User
from utils.exceptions import Forbidden
from utils.headers import get_api_key

bp = Blueprint("webhooks", __name__)

UPGRADE_EVENT = "user.upgraded"


@bp.post("/polka/webhooks")
def polka_webhook():
    """
    Receive Polka events; `user.upgraded` turns on Chirpy Red for the user
    ---
    tags:
      - Webhooks
    security:
      - ApiKey: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            event: { type: string, example: user.upgraded }
            data:
              type: object
              properties:
                user_id: { type: string }
    responses:
      204:
        description: Accepted (or ignored event)
      401:
        description: Missing API key
      403:
        description: Wrong API key
      404:
        description: Unknown user
    """
    key = get_api_key(request.headers, current_app.config["API_KEY_HEADER"])
    expected = current_app.config["POLKA_KEY"]
    if not expected or not hmac.compare_digest(key.encode(), expected.encode()):
        raise Forbidden("Not correct API key")

    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        abort(400, description="body must be a JSON object")
    if payload.get("event") != UPGRADE_EVENT:
        return ("", 204)

    data = payload.get("data")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        abort(400, description="data must be a JSON object")
    raw_user_id = data.get("user_id")
    try:
        user_id = str(uuid.UUID(str(raw_user_id)))
    except ValueError:
        abort(400, description="data.user_id must be a UUID")

    user = storage.get(User, user_id)
    if not user:
        abort(404)
    user.is_chirpy_red = True
    storage.new(user)
    storage.save()
    logging.info("user %s upgraded to Chirpy Red", user_id)
    return ("", 204)
