from flask import Blueprint, current_app

from models import storage
from models.user import User
from utils.exceptions import Forbidden

bp = Blueprint("admin", __name__)


@bp.post("/reset")
def reset():
    """
    Delete every user (and, by cascade, their refresh tokens). Dev only.
    ---
    tags:
      - Admin
    responses:
      200:
        description: Database reset
      403:
        description: Not running with PLATFORM=dev
    """
    if current_app.config.get("PLATFORM") != "dev":
        raise Forbidden("Reset is only allowed in dev environment.")

    session = storage.get_session()
    deleted = session.query(User).delete()
    storage.save()
    return {"deleted_users": deleted}, 200
