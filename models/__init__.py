"""Models package; exposes the DBStorage singleton used by the API and services."""
from models.db_storage import DBStorage

storage = DBStorage()
