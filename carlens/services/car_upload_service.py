"""
Upload pipeline: store the image, ask the model about it, record the result.

The file write and the database insert are not atomic. When a later step
fails, the stored file is removed again so no orphan is left behind.
"""

import logging
from typing import BinaryIO, Optional

from sqlalchemy.exc import SQLAlchemyError

from carlens.core.errors import UpstreamError
from carlens.models import CarRecord
from carlens.services.annotation import AnnotationClient, Unstructured
from carlens.services.cars import CarRecordStore
from carlens.services.uploads import UploadStorage

logger = logging.getLogger(__name__)

def _read_stored(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()

def process_car_upload(
    owner_id: int,
    stream: Optional[BinaryIO],
    original_name: Optional[str],
    content_type: Optional[str],
    storage: UploadStorage,
    annotator: AnnotationClient,
    records: CarRecordStore,
) -> CarRecord:
    """
    Run the full upload for one image and return the created record.

    Raises:
        NoFileProvidedError: nothing was uploaded
        UpstreamError: the model call failed; nothing is kept
    """
    stored = storage.store(owner_id, stream, original_name)

    try:
        annotation = annotator.annotate(_read_stored(stored.path), content_type)
    except (UpstreamError, OSError):
        storage.remove(owner_id, stored.filename)
        raise

    if isinstance(annotation, Unstructured):
        logger.info(f"Storing unstructured description for {stored.filename}")

    try:
        record = records.create(
            owner_id=owner_id,
            filename=stored.filename,
            url=stored.url,
            car_info_json=annotation.to_json(),
        )
    except SQLAlchemyError:
        records.db.rollback()
        storage.remove(owner_id, stored.filename)
        raise

    logger.info(f"Uploaded and analyzed {stored.filename} as record {record.id}")
    return record
