from models.user import User
from models.refresh_token import RefreshToken
from sqlalchemy import create_engine, event
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.exc import SQLAlchemyError
from os import getenv
from models.base_model import Base
from dotenv import load_dotenv

load_dotenv()
# Map model names for easy querying
classes = {
    "User": User,
    "RefreshToken": RefreshToken,
}

DEFAULT_DATABASE_URL = "sqlite:///chirpy.db"


def _make_engine(url: str, echo: bool = False):
    """Build an engine; SQLite gets foreign keys enabled (needed for ON DELETE CASCADE)."""
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True, echo=echo)

    kwargs = {"echo": echo, "connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # one shared connection, otherwise every session sees an empty database
        kwargs["poolclass"] = StaticPool
    engine = create_engine(url, **kwargs)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


class DBStorage:
    __engine = None
    __session = None

    def __init__(self, database_url=None):
        """Remember the database URL; the engine is built by reload()"""
        self.__url = database_url or getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

    def reload(self, database_url=None, echo=False):
        """(Re)create engine, tables and the scoped session"""
        if self.__session is not None:
            self.__session.remove()
        if self.__engine is not None:
            self.__engine.dispose()
        if database_url:
            self.__url = database_url
        self.__engine = _make_engine(self.__url, echo=echo)
        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def new(self, obj):
        """Add object to session"""
        self.__session.add(obj)

    def save(self):
        """Commit session"""
        try:
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise

    def get(self, cls, id):
        """Fetch one object by class and primary key"""
        if cls in classes.values():
            return self.__session.get(cls, id)
        return None

    def find_user_by_email(self, email):
        """Fetch a user by (unique) email, or None"""
        return self.__session.query(User).filter(User.email == email).first()

    def count(self, cls=None):
        """Count objects"""
        if cls:
            return self.__session.query(cls).count()
        return sum(self.__session.query(model).count() for model in classes.values())

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    # expose the SQLAlchemy session for advanced querying (joins, filters, etc.)
    def get_session(self):
        return self.__session
