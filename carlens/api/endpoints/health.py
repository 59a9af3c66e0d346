import os

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import text

from carlens.api.deps import get_storage
from carlens.db.session import get_db
from carlens.services.uploads import UploadStorage

router = APIRouter()

@router.get("/health")
def health_check(
    db: Session = Depends(get_db),
    storage: UploadStorage = Depends(get_storage)
):
    """
    Report whether the database answers and the upload directory is writable.

    Either failing marks the service unhealthy; the response is still 200.
    """
    health_status = {
        "status": "healthy",
        "database": "online",
        "uploads": "writable",
    }

    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        health_status["database"] = "offline"
        health_status["status"] = "unhealthy"
        health_status["database_error"] = str(e)

    if not os.path.isdir(storage.root) or not os.access(storage.root, os.W_OK):
        health_status["uploads"] = "unavailable"
        health_status["status"] = "unhealthy"

    return health_status
