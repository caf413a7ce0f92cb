import sys
from pathlib import Path

# Ajoute la racine du projet au PYTHONPATH EN PREMIER
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from fastapi.testclient import TestClient

from app.core.database import Database
from app.main import create_app


@pytest.fixture
def database():
    """Base SQLite en mémoire, neuve pour chaque test"""
    database = Database("sqlite://")
    database.connect()
    yield database
    database.disconnect()


@pytest.fixture
def app(database):
    return create_app(database)


@pytest.fixture
def client(app):
    """Client de test FastAPI (lifespan exécuté)"""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def db(database):
    """Session DB pour les tests"""
    db = database.SessionLocal()
    yield db
    db.close()
