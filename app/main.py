import logging
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import FileResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from .config import Settings, configure_logging, get_settings
from .errors import TsvInputError
from .models import HealthResponse
from .normalize import decode_body, transform
from .rules import POST_ONLY_MESSAGE
from .validate import check_size, validate_text

logger = logging.getLogger(__name__)

configure_logging(get_settings())

app = FastAPI(
    title="tsv-normalizer",
    description="Expand multi-valued TSV cells into rows and aggregate them back",
    version="0.1.0",
)

FORM_FIELD = "postData"
FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


@app.exception_handler(TsvInputError)
async def tsv_input_error_handler(request: Request, exc: TsvInputError):
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def _read_body(request: Request, settings: Settings) -> str:
    raw = await request.body()
    check_size(raw, settings.max_input_bytes)

    content_type = request.headers.get("content-type", "").lower()
    if not content_type.startswith(FORM_TYPES):
        return decode_body(raw)

    form = await request.form()
    value = form.get(FORM_FIELD)
    if isinstance(value, UploadFile):
        return decode_body(await value.read())
    return value or ""


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.get("/")
@app.get("/tsv")
def index(settings: Settings = Depends(get_settings)):
    if not settings.static_page.is_file():
        return PlainTextResponse(f"{settings.static_page.name} not found", status_code=404)
    return FileResponse(settings.static_page, media_type="text/html")


@app.post("/", response_class=PlainTextResponse)
@app.post("/tsv", response_class=PlainTextResponse)
async def transform_tsv(
    request: Request,
    mode: Optional[str] = Query(default=None),
    settings: Settings = Depends(get_settings),
):
    try:
        text = validate_text(await _read_body(request, settings))
        if mode is None:
            mode = settings.default_mode
        result = await run_in_threadpool(transform, text, mode)
    except TsvInputError:
        raise
    except Exception:
        logger.exception("transform failed")
        return PlainTextResponse("An error occurred.", status_code=500)
    return PlainTextResponse(result)


@app.api_route("/", methods=["PUT", "PATCH", "DELETE"])
@app.api_route("/tsv", methods=["PUT", "PATCH", "DELETE"])
def post_only() -> Response:
    return PlainTextResponse(POST_ONLY_MESSAGE)
