"""Credential extraction from inbound request headers."""
from __future__ import annotations

from utils.exceptions import MalformedHeader, MissingHeader

API_KEY_HEADER = "X-API-Key"


def get_bearer_token(headers) -> str:
    """
    Return the token from `Authorization: Bearer <token>`.
    `headers` is anything with a mapping style .get (werkzeug Headers, dict).
    """
    auth = headers.get("Authorization")
    if not auth:
        raise MissingHeader("Missing Authorization header")
    parts = auth.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise MalformedHeader()
    return parts[1]


def get_api_key(headers, header_name: str = API_KEY_HEADER) -> str:
    key = headers.get(header_name)
    if not key:
        raise MissingHeader(f"Missing {header_name} header")
    return key
