"""Landing page router."""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from chatauth.core.constants import Routes, Templates

router = APIRouter(prefix=Routes.HOME.prefix, tags=[Routes.HOME.tag])


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Render the landing page with the Google sign-in link."""
    return Templates.TemplateResponse(
        request,
        "home.html",
        {
            "title": "Chatbot",
            "google_login_path": Routes.GOOGLE.prefix,
        },
    )
