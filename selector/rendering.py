# selector/rendering.py
import logging
from pathlib import Path

from fastapi import Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError
from pydantic import BaseModel

logger = logging.getLogger("selector")

NEW_IMAGE = "new_image.html"
ANNOTATE = "annotate.html"
VIEW = "view.html"
TEMPLATE_NAMES = (NEW_IMAGE, ANNOTATE, VIEW)


def load_templates(directory: Path) -> Jinja2Templates:
    """Load the page templates once; a missing or broken template raises here."""
    templates = Jinja2Templates(directory=str(directory))
    for name in TEMPLATE_NAMES:
        templates.get_template(name)
    return templates


def render(templates: Jinja2Templates, request: Request, name: str, model: BaseModel = None):
    context = model.model_dump() if model is not None else {}
    try:
        return templates.TemplateResponse(request, name, context)
    except TemplateError as e:
        # The client gets whatever was produced so far, which is nothing
        logger.error(f"Execute template error: {e}")
        return HTMLResponse("")
