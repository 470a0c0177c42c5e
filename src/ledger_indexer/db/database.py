from loguru import logger
from pathlib import Path
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import sessionmaker

from .schema import Base


def create_db_engine(database_uri: str) -> Engine:
    """Create an engine for the configured database, creating the SQLite directory if needed"""
    url = make_url(database_uri)
    if url.get_backend_name() == 'sqlite' and url.database not in (None, '', ':memory:'):
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(database_uri)

def init_db(engine: Engine) -> sessionmaker:
    """
    Create the database tables if they don't already exist and return a session factory.
    """
    existing = set(inspect(engine).get_table_names())
    missing = [name for name in Base.metadata.tables if name not in existing]
    if missing:
        Base.metadata.create_all(bind=engine)
        logger.info(f"Created tables: {', '.join(missing)}")
    else:
        logger.info("All tables already exist.")

    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
