# backend/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from dotenv import load_dotenv

from config import settings

load_dotenv()


def make_engine(url: str, echo: bool = False):
    """Create an engine; SQLite engines serialize writers with BEGIN IMMEDIATE."""
    if "sqlite" in url:
        # timeout = how long a writer waits for the database lock (seconds)
        connect_args = {"check_same_thread": False, "timeout": 30}
    else:
        connect_args = {}

    eng = create_engine(url, connect_args=connect_args, echo=echo)

    if eng.dialect.name == "sqlite":
        # SQLite has no SELECT ... FOR UPDATE. pysqlite also defers BEGIN until the
        # first write, so two readers could both decide a debit is safe. Taking the
        # write lock at BEGIN makes every transaction exclusive for writers.
        @event.listens_for(eng, "connect")
        def _disable_pysqlite_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(eng, "begin")
        def _begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return eng


engine = make_engine(settings.database_url, echo=settings.SQL_ECHO)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db(bind=None):
    # Register every table on Base.metadata
    import models.users, models.log, models.product, models.warehouse  # noqa: F401
    import models.contact, models.stock, models.operation  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
