# selector/context.py
from dataclasses import dataclass

from fastapi import HTTPException, Request
from fastapi.templating import Jinja2Templates

from selector.config import Settings
from selector.filestore import FileStore
from selector.kvstore import DiskStore


@dataclass
class AppContext:
    settings: Settings
    files: FileStore
    db: DiskStore
    templates: Jinja2Templates


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def image_param(image: str) -> str:
    """The `{image}` path segment; an empty one is a client error."""
    if not image:
        raise HTTPException(status_code=400, detail="No image specified!")
    return image
