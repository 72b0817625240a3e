from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from timing_asgi import TimingMiddleware, TimingClient  # type: ignore
from timing_asgi.integrations import StarletteScopeToName  # type: ignore

from codeclub.core import config
from codeclub.core.database.engine import close_db, init_db
from codeclub.core.errors import AppError
from codeclub.core.rate_limit import limiter
from codeclub.features.admin.routes import router as admin_router
from codeclub.features.events.routes import router as event_router
from codeclub.features.members.routes import router as member_router
from codeclub.features.permissions.routes import router as permission_router
from codeclub.features.projects.routes import router as project_router
from codeclub.features.roles.routes import router as role_router
from codeclub.features.skills.routes import router as skill_router
from codeclub.features.tags.routes import router as tag_router
from codeclub.features.users.routes import router as auth_router
from codeclub.utils import get_logger


log = get_logger(__name__)
log.info("Initializing server")
app = FastAPI(
    title="Code Club Backend",
    description="Community API with GitHub sign-in and role-based administration",
    version="0.1.0",
    docs_url="/docs" if config.ENABLE_DOCS else None,
    redoc_url="/redoc" if config.ENABLE_DOCS else None,
    openapi_url="/openapi.json" if config.ENABLE_DOCS else None
)
app.state.limiter = limiter


class PrintTimings(TimingClient):
    def timing(self, metric_name, timing, tags):
        log.debug(dict(route=metric_name.removeprefix("main.codeclub.features."), timing=timing, tags=tags))


app.add_middleware(TimingMiddleware, client=PrintTimings(), metric_namer=StarletteScopeToName("main", app))

if config.ENABLE_DOCS:
    log.warning("Docs enabled")
if config.ALLOW_ORIGIN:
    log.warning("Setting allow origin to %s", config.ALLOW_ORIGIN)
    origins = [config.ALLOW_ORIGIN]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(AppError)
async def app_error_handler(_request: Request, exc: AppError):
    log.info("%s: %s", type(exc).__name__, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError):
    errors = dict()
    for error in exc.errors():
        if "loc" not in error or "msg" not in error:
            continue
        key = error["loc"][-1]
        if key == "__root__":
            key = "root"
        errors[key] = error["msg"]
    log.info("Request validation error %s", errors)
    return JSONResponse(status_code=400, content=jsonable_encoder({"error": "Invalid request", "fields": errors}))


@app.exception_handler(RateLimitExceeded)
def rate_limit_exceeded_handler(_request: Request, _exc: RateLimitExceeded) -> Response:
    return JSONResponse({"error": "You are going too fast"}, status_code=429)


@app.on_event("startup")
async def startup():
    """Initialize database on application startup."""
    log.info("Initializing database...")
    await init_db()
    log.info("Database initialized successfully")


@app.on_event("shutdown")
async def shutdown():
    await close_db()
    log.info("Database connections closed")


@app.get("/")
async def root():
    """Root endpoint - API health check."""
    return {
        "message": "Code Club API",
        "version": "0.1.0",
        "status": "online",
        "docs": "/docs" if config.ENABLE_DOCS else None,
        "authentication": {
            "info": "Protected endpoints require Bearer token in Authorization header",
            "sign_in": ["/auth/github", "/auth/github/callback"],
            "protected_endpoints": ["/auth/me", "/members/profile", "/admin/*", "/roles/*", "/permissions/me"],
            "public_endpoints": ["/members", "/projects", "/events", "/skills", "/tags"]
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(member_router, prefix="/members", tags=["members"])
app.include_router(project_router, prefix="/projects", tags=["projects"])
app.include_router(skill_router, prefix="/skills", tags=["skills"])
app.include_router(tag_router, prefix="/tags", tags=["tags"])
app.include_router(event_router, prefix="/events", tags=["events"])

# Dashboard
app.include_router(admin_router, prefix="/admin", tags=["admin"])
app.include_router(role_router, prefix="/roles", tags=["roles"])
app.include_router(permission_router, prefix="/permissions", tags=["permissions"])
