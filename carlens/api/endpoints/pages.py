import os

from fastapi import APIRouter
from fastapi.responses import FileResponse

WEB_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "web")

router = APIRouter(include_in_schema=False)

@router.get("/")
def landing_page():
    """Featured car plus the login / signup form."""
    return FileResponse(os.path.join(WEB_DIR, "index.html"))

@router.get("/dashboard")
def dashboard_page():
    """Upload form and the user's gallery."""
    return FileResponse(os.path.join(WEB_DIR, "dashboard.html"))
