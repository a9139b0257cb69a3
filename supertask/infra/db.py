from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

from supertask.config import SETTINGS

Base = declarative_base()


def create_session_factory(database_url: str) -> sessionmaker:
    engine = create_engine(database_url, pool_pre_ping=True)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


SessionLocal = create_session_factory(SETTINGS.database_url)


def init_db(session_factory: sessionmaker = SessionLocal) -> None:
    from . import models  # noqa: F401

    bind = session_factory.kw["bind"]
    Base.metadata.create_all(bind=bind)
    with bind.connect() as connection:
        connection.execute(text("SELECT 1"))
