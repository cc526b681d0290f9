import os
import tempfile

# The app builds its default engine at import time; keep it away from real data
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(tempfile.mkdtemp(prefix="stock-master-"), "app.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from database import get_db, init_db, make_engine
from utils.tokenJWT import create_access_token
from tests.helpers import seed_master_data


@pytest.fixture
def engine(tmp_path):
    # A file database so that sessions in other threads see the same data
    eng = make_engine(f"sqlite:///{tmp_path / 'ledger.db'}")
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    # expire_on_commit=False: reading ids after commit must not reopen a transaction
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seed(session_factory):
    with session_factory() as session:
        return seed_master_data(session)


@pytest.fixture
def client(session_factory):
    import main

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    main.app.dependency_overrides[get_db] = _get_db
    with TestClient(main.app, raise_server_exceptions=False) as c:
        yield c
    main.app.dependency_overrides.clear()


def _auth(email):
    return {"Authorization": f"Bearer {create_access_token({'sub': email})}"}


@pytest.fixture
def admin_headers(seed):
    return _auth("admin@example.com")


@pytest.fixture
def staff_headers(seed):
    return _auth("staff@example.com")


@pytest.fixture
def viewer_headers(seed):
    return _auth("viewer@example.com")
