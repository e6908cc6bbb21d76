# selector/main.py
import argparse
import logging
import sys

import uvicorn
from brotli_asgi import BrotliMiddleware
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from selector.config import Settings, load_settings
from selector.context import AppContext
from selector.filestore import FileStore
from selector.kvstore import DiskStore, flat_transform
from selector.rendering import load_templates
from selector.routes import router

logger = logging.getLogger("selector")


def configure_logging(settings: Settings):
    """Log to stdout and to a file under the log directory."""
    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    settings.log_dir.mkdir(parents=True, exist_ok=True)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    file_handler = logging.FileHandler(settings.log_dir / "selector.log")
    file_handler.setFormatter(formatter)

    logger.handlers = [stream_handler, file_handler]
    logger.setLevel(settings.log_level)
    # avoid duplicate logs through the root logger
    logger.propagate = False


async def plain_text_error(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


def create_app(settings: Settings = None) -> FastAPI:
    if settings is None:
        settings = load_settings()

    # Templates are parsed up front so a bad one stops startup
    context = AppContext(
        settings=settings,
        files=FileStore(settings.images_dir),
        db=DiskStore(settings.data_dir, transform=flat_transform, temp_dir=settings.data_temp_dir),
        templates=load_templates(settings.template_dir),
    )

    # No docs routes: every unknown path falls through to the greeting
    app = FastAPI(
        title="selector",
        description="Upload images and pick points on them",
        version="1.0.0",
        openapi_url=None,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allowed_origins],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(BrotliMiddleware)

    app.add_exception_handler(StarletteHTTPException, plain_text_error)
    app.include_router(router)
    return app


def main(argv=None):
    settings = load_settings()

    parser = argparse.ArgumentParser(prog="selector")
    parser.add_argument("-port", "--port", default=str(settings.port), help="port to listen on")
    args = parser.parse_args(argv)

    settings.port = int(args.port)
    configure_logging(settings)

    app = create_app(settings)
    logger.info(f"Listening on port {settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
