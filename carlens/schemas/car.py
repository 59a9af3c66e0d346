import json
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

def decode_car_info(value: Any) -> Any:
    """car_info is stored as JSON text; expose it as a JSON value."""
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            return {"description": value}
    return value

class CarRecordResponse(BaseModel):
    """Schema for returning a car record from the database."""
    id: int = Field(..., description="Record ID")
    filename: str = Field(..., description="Stored file name")
    url: str = Field(..., description="Public path of the image")
    owner_id: int = Field(..., description="ID of the uploading user")
    car_info: Optional[Any] = Field(None, description="Metadata the AI returned for the image")
    uploaded_at: datetime = Field(..., description="Upload timestamp")

    decode_info = field_validator("car_info", mode="before")(decode_car_info)

    model_config = {
        "from_attributes": True,
        "json_schema_extra": {
            "example": {
                "id": 1,
                "filename": "1723453230000-car.jpg",
                "url": "/cars/2/1723453230000-car.jpg",
                "owner_id": 2,
                "car_info": {
                    "make": "Toyota",
                    "model": "Corolla",
                    "year": 2020,
                    "body_type": "Sedan",
                    "horsepower": 139,
                    "top_speed_kph": 180,
                    "fuel_efficiency_kmpl": 14.5,
                    "price_usd": 20000
                },
                "uploaded_at": "2024-08-12T09:00:30Z"
            }
        }
    }

class UploadResponse(BaseModel):
    """Schema returned after a successful upload and analysis."""
    message: str
    id: int
    url: str
    car_info: Optional[Any] = None

    decode_info = field_validator("car_info", mode="before")(decode_car_info)
