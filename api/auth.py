"""
Authentication blueprint:
- POST /login    email + password -> access token and refresh token
- POST /refresh  Bearer <refresh token> -> new access token
- POST /revoke   Bearer <refresh token> -> 204

Refresh tokens are opaque and stored in the refresh_tokens table; refreshing
does not rotate them. Access tokens are stateless HS256 JWTs.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.user import UserLoginSchema, UserOutSchema
from services.session import get_session_service

bp = Blueprint("auth", __name__)

user_login_schema = UserLoginSchema()
user_out_schema = UserOutSchema()


@bp.post("/login")
def login():
    """
    Login: return user, access token and refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
             expires_in_seconds: { type: integer, description: "capped at 3600" }
    responses:
      200:
        description: OK (returns tokens)
      401:
        description: Incorrect email or password
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)

    result = get_session_service().login(
        data["email"], data["password"], data.get("expires_in_seconds")
    )
    body = user_out_schema.dump(result.user)
    body.update(
        {
            "token": result.access_token,
            "refresh_token": result.refresh_token,
            "token_type": "bearer",
            "expires_in": result.expires_in,
        }
    )
    return jsonify(body), 200


@bp.post("/refresh")
def refresh():
    """
    Use a refresh token to obtain a new access token (no rotation)
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK (returns a 1 hour access token)
      401:
        description: Unknown, revoked or expired refresh token
    """
    token = get_session_service().refresh(request.headers)
    return jsonify({"token": token}), 200


@bp.post("/revoke")
def revoke():
    """
    Revoke a refresh token (kept for audit, unusable afterwards)
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: ""
      404:
        description: Unknown refresh token
    """
    get_session_service().revoke(request.headers)
    return ("", 204)
