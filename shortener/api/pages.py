from pathlib import Path
import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.orm import Session

from shortener.core.config import Settings, get_settings
from shortener.db import database
from shortener.schemas import URLCreateRequest
from shortener.schemas.URLCreateRequest import first_error_message
from shortener.services.shortener import URLService

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["pages"], include_in_schema=False)


def _is_htmx(request: Request) -> bool:
    return request.headers.get("hx-request", "").lower() == "true"


def _render_result(request: Request, context: dict, status_code: int = status.HTTP_200_OK):
    # HTMX swaps in the fragment only; plain form posts get the whole page back
    template = "partials/result.html" if _is_htmx(request) else "index.html"
    return templates.TemplateResponse(request, template, context, status_code=status_code)


@router.get("/")
def index(request: Request, settings: Settings = Depends(get_settings)):
    return templates.TemplateResponse(request, "index.html", {"title": settings.project_name})


@router.post("/shorten")
def shorten_form(
    request: Request,
    url: str = Form(""),
    db: Session = Depends(database.get_db),
    settings: Settings = Depends(get_settings),
):
    context = {"title": settings.project_name, "submitted_url": url}
    try:
        url_request = URLCreateRequest(url=url)
    except ValidationError as e:
        context["error"] = first_error_message(e)
        logger.info("Form rejected %r: %s", url[:50], context["error"])
        return _render_result(request, context, status.HTTP_422_UNPROCESSABLE_ENTITY)

    db_url = URLService.create_short_url(db, url_request.long_url, settings)
    context["short_url"] = f"{settings.base_url.rstrip('/')}/{db_url.shorturl}"
    context["long_url"] = db_url.longurl
    return _render_result(request, context)
