from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from .error import ClientError, ServerError
from .middleware import CSRFGuardMiddleware
from contextlib import asynccontextmanager
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from src.depends import engine, init_database

    await init_database()
    logger.info("Database ready")
    yield
    await engine.dispose()


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    message = exc.base_error.message if exc.expose_message else "Internal server error"
    error_dict = {"code": exc.base_error.code, "message": message}
    logger.error(f"Server error: {exc.base_error.code}: {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": error_dict}
    )


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Studio Access API", version="0.1.0", lifespan=lifespan)

    # Added first so it runs innermost, after CORS preflight handling
    app.add_middleware(
        CSRFGuardMiddleware,
        trust_proxy=ApplicationConfig.TRUSTED_PROXY,
        exempt_paths=ApplicationConfig.CSRF_EXEMPT_PATHS,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import access, auth, health_check, invitation, membership, setup

    app.include_router(health_check.router, tags=["Health"])
    app.include_router(setup.router, tags=["Setup"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(invitation.router, tags=["Invitations"])
    app.include_router(membership.router, tags=["Members"])
    app.include_router(access.router, tags=["Access"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
