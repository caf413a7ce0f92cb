import logging

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from app.core.config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """Client de persistance: un engine ouvert au démarrage, réutilisé par toutes les requêtes"""

    def __init__(self, url: str = None):
        self.url = url or settings.DATABASE_URL
        self.engine = None
        self.SessionLocal = None

    @property
    def is_connected(self) -> bool:
        return self.engine is not None

    def connect(self):
        if self.is_connected:
            return
        kwargs = {"echo": False}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            # SQLite en mémoire: une seule connexion partagée sinon chaque session voit une base vide
            if ":memory:" in self.url or self.url == "sqlite://":
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(self.url, **kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Connected to database {self.engine.url.render_as_string(hide_password=True)}")

    def disconnect(self):
        if not self.is_connected:
            return
        self.engine.dispose()
        self.engine = None
        self.SessionLocal = None
        logger.info("Disconnected from database")

    def ping(self) -> bool:
        if not self.is_connected:
            return False
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def session(self):
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()


def get_db(request: Request):
    """Dépendance sessionDB"""
    yield from request.app.state.database.session()
