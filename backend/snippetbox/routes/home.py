"""
Snippetbox Backend - Home Page Route
=====================================

What:  GET / renders the home page from Jinja2 templates.
How:   `pages/home.html` extends `base.html` and includes `partials/nav.html`.
       Any other unmatched path never reaches this handler; the router
       answers 404 through the client-error handler.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from snippetbox.exceptions import TemplateRenderError

router = APIRouter(tags=["Pages"])

HOME_TEMPLATE = "pages/home.html"


def get_templates(request: Request) -> Jinja2Templates:
    """FastAPI dependency: the template set configured by the app factory."""
    return request.app.state.templates


@router.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    templates: Jinja2Templates = Depends(get_templates),
) -> HTMLResponse:
    try:
        return templates.TemplateResponse(request, HOME_TEMPLATE, {})
    except (TemplateError, OSError) as exc:
        raise TemplateRenderError(
            HOME_TEMPLATE,
            message=f"could not render '{HOME_TEMPLATE}': {exc}",
        ) from exc
