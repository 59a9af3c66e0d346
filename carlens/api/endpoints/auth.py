import logging

from fastapi import APIRouter, Depends, Request, status

from carlens.api.deps import get_credential_store
from carlens.core.errors import NotFoundError
from carlens.core.security import TokenData, get_current_user, issue_token
from carlens.schemas.auth import CredentialsRequest, MessageResponse, TokenResponse, UserResponse
from carlens.services.credentials import CredentialStore

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def signup(
    credentials: CredentialsRequest,
    store: CredentialStore = Depends(get_credential_store)
) -> MessageResponse:
    """
    Register a new account.

    Returns 409 when the email is already registered.
    """
    store.create_user(credentials.email, credentials.password)
    return MessageResponse(message="User created")

@router.post("/login", response_model=TokenResponse)
def login(
    request: Request,
    credentials: CredentialsRequest,
    store: CredentialStore = Depends(get_credential_store)
) -> TokenResponse:
    """
    Exchange email and password for a bearer token valid for one hour.
    """
    user = store.verify_credentials(credentials.email, credentials.password)
    logger.info(f"User {user.id} logged in")
    return TokenResponse(token=issue_token(user.id, request.app.state.settings))

@router.get("/me", response_model=UserResponse)
def get_user_info(
    current_user: TokenData = Depends(get_current_user),
    store: CredentialStore = Depends(get_credential_store)
) -> UserResponse:
    """
    Return the account the bearer token belongs to.
    """
    user = store.get_user(current_user.user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
