from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from solcraft.api.endpoints import fees as fee_endpoints
from solcraft.api.endpoints import investments as investment_endpoints
from solcraft.api.endpoints import players as player_endpoints
from solcraft.api.endpoints import tournaments as tournament_endpoints
from solcraft.core.config import settings
from solcraft.core.database import init_db
from solcraft.core.logging import configure_logging, get_logger

configure_logging(settings.LOG_LEVEL, json_logs=settings.JSON_LOGS or settings.APP_ENV == "production")
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("application_started", env=settings.APP_ENV)
    yield


app = FastAPI(title="SolCraft Tournament Funding API", lifespan=lifespan)

# Include routers
app.include_router(tournament_endpoints.router, prefix=f"{settings.API_PREFIX}/tournaments", tags=["Tournaments"])
app.include_router(investment_endpoints.router, prefix=f"{settings.API_PREFIX}/investments", tags=["Investments"])
app.include_router(player_endpoints.router, prefix=f"{settings.API_PREFIX}/players", tags=["Players"])
app.include_router(fee_endpoints.router, prefix=f"{settings.API_PREFIX}/fees", tags=["Fees"])


# Every error body is {"message": ...}; the dashboard client reads that key
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("http_error", path=request.url.path, status_code=exc.status_code, detail=exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=422,
        content={"message": f"{field}: {message}" if field else message},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unexpected_error", path=request.url.path, error_type=type(exc).__name__, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


@app.get("/")
async def root():
    return {"message": "SolCraft Tournament Funding API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("solcraft.main:app", host="0.0.0.0", port=8000, reload=settings.APP_ENV == "development")
