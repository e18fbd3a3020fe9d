import asyncio
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from supabase import AuthApiError, PostgrestAPIError, StorageException

from judo_hub.config import settings
from judo_hub.core.rate_limit import limiter
from judo_hub.core.session import SessionRegistry, session_sweep_loop
from judo_hub.database.supabase_client import SupabaseClient
from judo_hub.modules.auth import routes as auth_routes
from judo_hub.modules.documents import routes as documents_routes
from judo_hub.modules.groups import routes as groups_routes
from judo_hub.modules.portal import routes as portal_routes
from judo_hub.modules.profiles import routes as profiles_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.state.sessions = None
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


def postgrest_status(code) -> int:
    code = str(code or "")
    if code == "42501":
        return 403
    if code == "PGRST116":
        return 404
    if code.startswith("23"):
        return 409
    return 502


@app.exception_handler(PostgrestAPIError)
async def postgrest_exception_handler(request: Request, exc: PostgrestAPIError):
    status_code = postgrest_status(exc.code)
    logger.warning("Database request failed (%s): %s", exc.code, exc.message)
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})


@app.exception_handler(StorageException)
async def storage_exception_handler(request: Request, exc: StorageException):
    logger.warning("Storage request failed: %s", exc)
    return JSONResponse(status_code=502, content={"detail": str(exc), "code": "storage_error"})


@app.exception_handler(AuthApiError)
async def auth_exception_handler(request: Request, exc: AuthApiError):
    logger.warning("Auth request failed: %s", exc.message)
    status_code = getattr(exc, "status", None) or 400
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": getattr(exc, "code", None)})


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.errors(include_url=False, include_context=False)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(portal_routes.router, prefix="/api/v1")
app.include_router(documents_routes.router, prefix="/api/v1")
app.include_router(groups_routes.router, prefix="/api/v1")
app.include_router(profiles_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    app.state.sessions = SessionRegistry(client_factory=SupabaseClient.new_client)
    app.state.session_sweeper = asyncio.create_task(session_sweep_loop(app.state.sessions))
    logger.info("Application startup")


@app.on_event("shutdown")
async def shutdown_event():
    sweeper = getattr(app.state, "session_sweeper", None)
    if sweeper is not None:
        sweeper.cancel()
    if app.state.sessions is not None:
        app.state.sessions.close_all()
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": "Welcome to judo-hub", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: the session registry exists once startup has run."""
    if app.state.sessions is None:
        return JSONResponse(status_code=503, content={"status": "starting"})
    return {"status": "ready", "sessions": len(app.state.sessions)}
