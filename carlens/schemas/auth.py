from datetime import datetime
from pydantic import BaseModel, Field

class CredentialsRequest(BaseModel):
    """Body of /signup and /login."""
    email: str = Field(..., min_length=1, description="Account email")
    password: str = Field(..., min_length=1, description="Plain text password")

class MessageResponse(BaseModel):
    message: str

class TokenResponse(BaseModel):
    token: str = Field(..., description="Signed bearer token, valid for one hour")
    token_type: str = "bearer"

class UserResponse(BaseModel):
    id: int
    email: str
    created_at: datetime

    model_config = {
        "from_attributes": True
    }
