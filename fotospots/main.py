# fotospots/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fotospots.api.v1.pages import router as pages_router
from fotospots.api.v1.spots import router as spots_router
from fotospots.api.v1.storage import router as storage_router
from fotospots.api.v1.upload import router as upload_router
from fotospots.core.config import get_settings
from fotospots.core.deps import templates
from fotospots.core.errors import GENERIC_ERROR_MESSAGE, FotospotError, ValidationFailed
from fotospots.db.session import init_db

# -----------------------------------------------------------------------------
# Logging: make sure we see clear startup errors in the console
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
log = logging.getLogger("fotospots")

# -----------------------------------------------------------------------------
# App
# -----------------------------------------------------------------------------
app = FastAPI(title="Fotospots Norddeutschland", debug=get_settings().DEBUG)

# -----------------------------------------------------------------------------
# Routers
# -----------------------------------------------------------------------------
app.include_router(spots_router, prefix="/api", tags=["spots"])
app.include_router(upload_router, prefix="/api", tags=["upload"])
app.include_router(storage_router, tags=["storage"])
app.include_router(pages_router, include_in_schema=False)


# -----------------------------------------------------------------------------
# Startup: create tables if missing (non-destructive)
# -----------------------------------------------------------------------------
@app.on_event("startup")
def _startup() -> None:
    try:
        init_db()
        log.info("DB init completed.")
    except Exception as e:
        # Keep serving /ping even when the database is unreachable.
        log.exception("DB init failed: %s", e)


# -----------------------------------------------------------------------------
# Minimal health endpoint
# -----------------------------------------------------------------------------
@app.get("/ping")
def ping():
    """Simple liveness check."""
    return {"ok": True}


# -----------------------------------------------------------------------------
# Exception handlers
# -----------------------------------------------------------------------------
def _is_api(request: Request) -> bool:
    return request.url.path.startswith("/api/")


@app.exception_handler(FotospotError)
async def fotospot_error_handler(request: Request, exc: FotospotError):
    """Domain errors -> {"error": ...} (+ "details" for validation failures)."""
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(exc.to_body(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request parameters are reported like schema failures (400)."""
    errors = {}
    for err in exc.errors():
        # Drop the "body"/"query"/"path" prefix from FastAPI's locations
        loc = [str(part) for part in err.get("loc", ())][1:] or ["body"]
        errors.setdefault(".".join(loc), err.get("msg", "Ungültiger Wert"))
    return JSONResponse(ValidationFailed(errors).to_body(), status_code=400)


@app.exception_handler(StarletteHTTPException)
async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """JSON errors for the API, the 404 page for everything else."""
    if exc.status_code == 404 and not _is_api(request):
        return templates.TemplateResponse(
            request,
            "404.html",
            {"path": request.url.path},
            status_code=404,
        )
    return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)


@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception):
    """Last resort: log and degrade to a generic 500, never crash."""
    log.exception("Unexpected error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": GENERIC_ERROR_MESSAGE}, status_code=500)
