from sqlalchemy import Column, Integer

class BaseModel:
    """Base class for all database models."""

    # Primary key with autoincrement=True to match SERIAL / AUTO_INCREMENT columns
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
