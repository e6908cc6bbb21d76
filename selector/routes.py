# selector/routes.py
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse
import magic
from starlette.datastructures import UploadFile

from selector import rendering
from selector.context import AppContext, get_context, image_param
from selector.kvstore import InvalidKeyError, KeyNotFoundError
from selector.schemas import AnnotatePage, ViewPage, decode_picks, encode_picks, parse_pick

logger = logging.getLogger("selector")

router = APIRouter()

ANY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
GENERIC_ERROR = "Sorry, something broke!"
GREETING = "Hi, you found selector"


def see_other(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


@router.api_route("/new", methods=ANY_METHODS)
def new_image(request: Request, ctx: AppContext = Depends(get_context)):
    """Upload form."""
    return rendering.render(ctx.templates, request, rendering.NEW_IMAGE)


@router.api_route("/post_images", methods=ANY_METHODS)
async def post_image(request: Request, ctx: AppContext = Depends(get_context)):
    """Store the uploaded image under its content hash and show it."""
    try:
        form = await request.form()
    except Exception as e:
        logger.error(f"FormFile error: {e}")
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)

    # A file input left empty arrives as a part with filename=""
    image = form.get("image")
    if not isinstance(image, UploadFile) or not image.filename:
        logger.error("FormFile error: no image file in upload")
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)

    try:
        data = await image.read()
    except Exception as e:
        logger.error(f"ReadAll error: {e}")
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)
    finally:
        await form.close()

    try:
        sha = await run_in_threadpool(ctx.files.store, data)
    except OSError as e:
        logger.error(f"WriteFile error: {e}")
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)

    logger.info(f"{sha} uploaded")
    return see_other(f"/view/{sha}")


@router.get("/annotate/{image:path}")
def annotate_form(
    request: Request,
    image: str = Depends(image_param),
    ctx: AppContext = Depends(get_context),
):
    """Pick form for an image, unless it has been annotated already."""
    try:
        ctx.db.read(image)
    except (KeyNotFoundError, InvalidKeyError, OSError):
        return rendering.render(ctx.templates, request, rendering.ANNOTATE, AnnotatePage(image=image))

    logger.info(f"{image} already exists, redirecting")
    return see_other(f"/view/{image}")


@router.post("/annotate/{image:path}")
async def annotate_submit(
    request: Request,
    image: str = Depends(image_param),
    ctx: AppContext = Depends(get_context),
):
    """Record the submitted picks for an image, replacing any earlier ones."""
    try:
        form = await request.form()
    except Exception as e:
        logger.warning(f"Bad form submitted: {e}")
        raise HTTPException(status_code=400, detail="Bad form!")

    if "pick" not in form:
        logger.warning("Can't find pick in form")
        raise HTTPException(status_code=400, detail="Bad form!")
    picks = [str(p) for p in form.getlist("pick")]

    try:
        encoded = encode_picks(picks)
    except (TypeError, ValueError):
        logger.error(f"Can't encode picks: {picks}")
        # TODO: confirm whether an encoding failure should be a 500 like the other server errors
        raise HTTPException(status_code=400, detail=GENERIC_ERROR)

    try:
        await run_in_threadpool(ctx.db.write, image, encoded)
    except (InvalidKeyError, OSError) as e:
        logger.error(f"Problem writing to db: {image}: {encoded!r}: {e}")
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)

    logger.info(f"{image} picked: {picks}")
    return see_other(f"/view/{image}")


@router.api_route("/view/{image:path}", methods=ANY_METHODS)
def view_image(
    request: Request,
    image: str = Depends(image_param),
    ctx: AppContext = Depends(get_context),
):
    """The image with its picks overlaid, or a link to annotate it."""
    page = ViewPage(image=image)

    try:
        raw = ctx.db.read(image)
    except (KeyNotFoundError, InvalidKeyError, OSError):
        raw = None

    if raw is not None:
        try:
            page.coordinates = [parse_pick(p) for p in decode_picks(raw)]
        except ValueError as e:
            logger.error(f"Broke in the unmarshal: {image}: {e}")
            raise HTTPException(status_code=500, detail=GENERIC_ERROR)
        page.annotated = True

    logger.info(f"{page!r}")
    return rendering.render(ctx.templates, request, rendering.VIEW, page)


@router.api_route("/images/{name:path}", methods=["GET", "HEAD"])
def serve_image(name: str, ctx: AppContext = Depends(get_context)):
    """Raw uploaded bytes, with the content type sniffed from the data."""
    try:
        path = ctx.files.path(name)
    except ValueError:
        raise HTTPException(status_code=404, detail="404 page not found")
    if not path.is_file():
        raise HTTPException(status_code=404, detail="404 page not found")

    return FileResponse(path, media_type=magic.from_file(str(path), mime=True))


@router.api_route("/annotate", methods=ANY_METHODS)
@router.api_route("/view", methods=ANY_METHODS)
@router.api_route("/images", methods=ANY_METHODS)
def add_trailing_slash(request: Request):
    """Bare route prefixes move permanently to their slash form."""
    url = request.url.path + "/"
    if request.url.query:
        url += "?" + request.url.query
    return RedirectResponse(url, status_code=301)


@router.api_route("/{rest:path}", methods=ANY_METHODS)
def hello(rest: str):
    return PlainTextResponse(GREETING)
