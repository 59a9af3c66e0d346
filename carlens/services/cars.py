import logging
import random
from typing import List, Optional

from sqlalchemy.orm import Session

from carlens.core.errors import NotFoundError
from carlens.models import CarRecord
from carlens.services.uploads import UploadStorage

logger = logging.getLogger(__name__)

# Largest value an INTEGER primary key can hold
MAX_RECORD_ID = 2**31 - 1

class CarRecordStore:
    """
    Persistence for uploaded car records.

    Rows and image files are two separate copies of the same upload; this
    class keeps them in step on delete, but nothing here is transactional
    across the two.
    """

    def __init__(self, db: Session, storage: UploadStorage, rng: Optional[random.Random] = None):
        self.db = db
        self.storage = storage
        self.rng = rng or random.Random()

    def create(self, owner_id: int, filename: str, url: str, car_info_json: Optional[str]) -> CarRecord:
        record = CarRecord(
            owner_id=owner_id,
            filename=filename,
            url=url,
            car_info=car_info_json,
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def list_by_owner(self, owner_id: int) -> List[CarRecord]:
        """All records of one user, newest first."""
        return self.db.query(CarRecord)\
            .filter(CarRecord.owner_id == owner_id)\
            .order_by(CarRecord.uploaded_at.desc(), CarRecord.id.desc())\
            .all()

    def pick_featured(self) -> CarRecord:
        """One record chosen uniformly at random across all users."""
        total = self.db.query(CarRecord).count()
        if total == 0:
            raise NotFoundError("No cars found")

        # Random offset over the primary key order instead of ORDER BY RANDOM()
        offset = self.rng.randrange(total)
        record = self.db.query(CarRecord)\
            .order_by(CarRecord.id)\
            .offset(offset)\
            .limit(1)\
            .first()
        if record is None:
            # Rows were deleted between the count and the read
            raise NotFoundError("No cars found")
        return record

    def delete_owned(self, record_id: int, owner_id: int) -> None:
        """
        Delete a record and its image, only if it belongs to owner_id.

        A missing record and someone else's record both raise NotFoundError.
        """
        if not 1 <= record_id <= MAX_RECORD_ID:
            raise NotFoundError("Image not found or not owned by user")

        record = self.db.query(CarRecord)\
            .filter(CarRecord.id == record_id, CarRecord.owner_id == owner_id)\
            .first()
        if record is None:
            raise NotFoundError("Image not found or not owned by user")

        filename = record.filename
        self.db.delete(record)
        self.db.commit()
        logger.info(f"Deleted car record {record_id} of user {owner_id}")

        self.storage.remove(owner_id, filename)
