from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from carlens.api.deps import get_annotator, get_car_store, get_storage
from carlens.core.errors import NoFileProvidedError
from carlens.core.security import TokenData, get_current_user
from carlens.schemas.auth import MessageResponse
from carlens.schemas.car import CarRecordResponse, UploadResponse
from carlens.services.annotation import AnnotationClient
from carlens.services.car_upload_service import process_car_upload
from carlens.services.cars import CarRecordStore
from carlens.services.uploads import UploadStorage

router = APIRouter()

@router.get("/featured-car", response_model=CarRecordResponse)
def get_featured_car(
    records: CarRecordStore = Depends(get_car_store)
) -> CarRecordResponse:
    """
    Get one random car from any user. Public, no token needed.
    """
    return records.pick_featured()

@router.post("/upload", response_model=UploadResponse)
def upload_car_image(
    image: Optional[UploadFile] = File(None),
    current_user: TokenData = Depends(get_current_user),
    storage: UploadStorage = Depends(get_storage),
    annotator: AnnotationClient = Depends(get_annotator),
    records: CarRecordStore = Depends(get_car_store)
) -> UploadResponse:
    """
    Upload a car image (multipart field ``image``) and analyze it.

    The image is kept even when the model reply is not valid JSON; the raw
    reply is stored as ``{"description": ...}`` instead. Returns 500 when
    the model call itself fails.
    """
    if image is None:
        raise NoFileProvidedError()

    record = process_car_upload(
        owner_id=current_user.user_id,
        stream=image.file,
        original_name=image.filename,
        content_type=image.content_type,
        storage=storage,
        annotator=annotator,
        records=records,
    )
    return UploadResponse(
        message="Uploaded & analyzed",
        id=record.id,
        url=record.url,
        car_info=record.car_info,
    )

@router.get("/images", response_model=List[CarRecordResponse])
def list_images(
    current_user: TokenData = Depends(get_current_user),
    records: CarRecordStore = Depends(get_car_store)
) -> List[CarRecordResponse]:
    """
    Get all images uploaded by the current user, newest first.
    """
    return records.list_by_owner(current_user.user_id)

@router.delete("/images/{image_id}", response_model=MessageResponse)
def delete_image(
    image_id: int,
    current_user: TokenData = Depends(get_current_user),
    records: CarRecordStore = Depends(get_car_store)
) -> MessageResponse:
    """
    Delete one of the current user's images.

    Returns 404 both for unknown ids and for images owned by someone else.
    """
    records.delete_owned(image_id, current_user.user_id)
    return MessageResponse(message="Image deleted successfully")
