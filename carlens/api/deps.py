from fastapi import Depends, Request
from sqlalchemy.orm import Session

from carlens.db.session import get_db
from carlens.services.annotation import AnnotationClient
from carlens.services.cars import CarRecordStore
from carlens.services.credentials import CredentialStore
from carlens.services.uploads import UploadStorage

def get_storage(request: Request) -> UploadStorage:
    return request.app.state.storage

def get_annotator(request: Request) -> AnnotationClient:
    return request.app.state.annotator

def get_credential_store(db: Session = Depends(get_db)) -> CredentialStore:
    return CredentialStore(db)

def get_car_store(
    request: Request,
    db: Session = Depends(get_db),
    storage: UploadStorage = Depends(get_storage),
) -> CarRecordStore:
    return CarRecordStore(db, storage, rng=request.app.state.rng)
