from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from solcraft.core.config import settings

# check_same_thread is a SQLite-only connect argument
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None):
    # Import models so they are registered on Base.metadata before create_all
    import solcraft.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
