from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from fastapi import Request

# Create Base class for declarative class definitions
Base = declarative_base()

def build_engine(db_url: str) -> Engine:
    """Create the database engine for the configured URL."""
    connect_args = {}
    if db_url.startswith("sqlite"):
        # Sessions are handed to threadpool workers by FastAPI
        connect_args["check_same_thread"] = False
    return create_engine(
        db_url,
        connect_args=connect_args,
        pool_pre_ping=True  # Test connections for liveness when checked out from pool
    )

def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Dependency to get database session
def get_db(request: Request):
    """
    Dependency for FastAPI endpoints that need a database session.
    Creates a new session for each request and closes it when done.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
