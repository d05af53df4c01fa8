import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from bootcamp_directory.connections import mongo_lifespan
from bootcamp_directory.api.auth import router as auth_router
from bootcamp_directory.utils.errors import ErrorResponse


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="Bootcamp Directory API", version="0.1.0", lifespan=mongo_lifespan)


def error_body(message: str) -> dict:
    return {"success": False, "error": message}


@app.exception_handler(ErrorResponse)
async def error_response_handler(request: Request, exc: ErrorResponse):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        field = err["loc"][-1] if err.get("loc") else None
        messages.append(f"{field}: {err['msg']}" if field is not None else err["msg"])
    return JSONResponse(status_code=400, content=error_body(", ".join(messages)))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content=error_body("Server Error"))


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


app.include_router(auth_router, prefix="/api/v1/auth")
