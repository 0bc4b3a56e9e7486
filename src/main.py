import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from vidtube.config import settings
from vidtube.db.session import Database
from vidtube.errors import ApiError
from vidtube.media.storage import LocalMediaStorage
from vidtube.responses import api_response
from vidtube.store.adapter import DuplicateRecord, RecordNotFound, StoreError, StoreUnavailable

from vidtube.auth.routing import router as auth_router
from vidtube.users.routing import router as users_router
from vidtube.videos.routing import router as videos_router
from vidtube.comments.routing import router as comments_router
from vidtube.likes.routing import router as likes_router
from vidtube.subscriptions.routing import router as subscriptions_router
from vidtube.playlists.routing import router as playlists_router
from vidtube.tweets.routing import router as tweets_router
from vidtube.dashboard.routing import router as dashboard_router

# Logging
_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=_level,
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)
for _logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(_logger_name).setLevel(_level)

logger = logging.getLogger("vidtube")

# CORS
origins = [origin for origin in settings.CORS_ORIGINS if origin]


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = Database(settings.DATABASE_URL, echo=settings.DB_ECHO)
    database.init(auto_create=settings.DB_AUTO_CREATE)
    app.state.db = database
    app.state.media = LocalMediaStorage(settings.MEDIA_UPLOAD_DIR, settings.MEDIA_URL_PREFIX)
    yield
    database.dispose()


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED,
)


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client = request.client.host if request.client else "unknown"
        logger.info(f"Request: {request.method} {request.url.path} from {client}")
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path} - {str(e)}")
            raise
        process_time = time.time() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} {response.status_code} in {process_time:.3f}s"
        )
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


app = FastAPI(
    title="VidTube API",
    description=(
        "VidTube is a video sharing backend: users, channels, videos, comments, likes, "
        "subscriptions, playlists, tweets and a channel dashboard.\n\n"
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)
app.state.limiter = limiter


def _error_response(status_code: int, message: str, errors=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "statusCode": status_code,
            "data": None,
            "message": message,
            "success": False,
            "errors": errors or [],
        },
    )


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    if isinstance(exc, RecordNotFound):
        return _error_response(404, "Resource does not exist")
    if isinstance(exc, DuplicateRecord):
        return _error_response(409, "Resource already exists")
    if isinstance(exc, StoreUnavailable):
        return _error_response(500, "Database error")
    logger.error(f"Unhandled store error on {request.url.path}: {exc}")
    return _error_response(500, "Something went wrong")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = exc.errors()
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg", "")}
        for err in details
    ]
    message = "All fields are required"
    if details and details[0].get("type") != "missing":
        message = errors[0]["message"].removeprefix("Value error, ")
    return _error_response(400, message, errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RateLimitExceeded)
def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    response = _error_response(429, f"Too many requests: {exc.detail}")
    response.headers["Retry-After"] = "60"
    return response


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Prometheus metrics
Instrumentator().instrument(app).expose(app, endpoint="/metrics")

app.mount(
    settings.MEDIA_URL_PREFIX,
    StaticFiles(directory=settings.MEDIA_UPLOAD_DIR, check_dir=False),
    name="media",
)

app.include_router(auth_router, prefix='/api/v1/users')
app.include_router(users_router, prefix='/api/v1/users')
app.include_router(videos_router, prefix='/api/v1/videos')
app.include_router(comments_router, prefix='/api/v1/comments')
app.include_router(likes_router, prefix='/api/v1/likes')
app.include_router(subscriptions_router, prefix='/api/v1/subscriptions')
app.include_router(playlists_router, prefix='/api/v1/playlist')
app.include_router(tweets_router, prefix='/api/v1/tweets')
app.include_router(dashboard_router, prefix='/api/v1/dashboard')


@app.get("/api/v1/healthcheck")
def healthcheck():
    return api_response("OK", "All OK")
