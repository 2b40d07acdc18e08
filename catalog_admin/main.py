import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from . import __version__
from .app_logging import setup_logger
from .authentication import router as auth_router
from .config import Settings
from .exceptions import AuthorizationDenied, CatalogError, ErrorKind, \
    STATUS_BY_KIND
from .gateway import AuthorizationGateway, INTERNAL_ERROR
from .routes import router as product_router
from .services.database import create_all, make_engine
from .services.identity import SupabaseAuthClient
from .services.profiles import ProfileStore
from .sessions import SessionCodec


async def catalog_error(request: Request, exc: CatalogError) -> Response:
    """Render a :class:`.CatalogError` according to its kind."""
    response = JSONResponse({'error': exc.detail},
                            status_code=STATUS_BY_KIND[exc.kind])
    if isinstance(exc, AuthorizationDenied) and exc.clear_session:
        codec: SessionCodec = request.app.extra['session_codec']
        codec.apply(response, codec.clear())
    return response


def frame_guard(response: Response) -> Response:
    """Prevent UI redress attacks."""
    response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
    response.headers['X-Frame-Options'] = 'DENY'
    return response


async def unexpected_error(request: Request, exc: Exception) -> Response:
    """Runs outside the app middleware, so the frame headers are set here."""
    logging.getLogger(__name__).error("Unhandled error on %s", request.url.path,
                                      exc_info=exc)
    return frame_guard(JSONResponse(
        {'error': INTERNAL_ERROR},
        status_code=STATUS_BY_KIND[ErrorKind.UNEXPECTED_FAILURE]))


def create_app(settings: Optional[Settings] = None, *,
               idp: Optional[SupabaseAuthClient] = None,
               engine: Optional[Engine] = None) -> FastAPI:
    """Build the app. ``idp`` and ``engine`` replace the configured ones."""
    settings = settings or Settings.from_env()
    setup_logger(settings.log_level)
    logger = logging.getLogger(__name__)

    if not settings.supabase_url or not settings.supabase_service_key:
        logger.error("SUPABASE_URL or SUPABASE_SERVICE_KEY is missing.")
    if not settings.secure:
        logger.warning("SECURE is off. This is for local development only.")

    logger.info(f"SERVER_ROOT_PATH: {settings.root_path}")
    logger.info(f"AUTH_SESSION_COOKIE_NAME: {settings.cookie_name}")

    if engine is None:
        engine = make_engine(settings.database_url, settings.echo_sql)
    create_all(engine)
    SessionLocal = sessionmaker(autoflush=False, bind=engine)

    if idp is None:
        idp = SupabaseAuthClient(settings.supabase_url,
                                 settings.supabase_service_key,
                                 jwt_secret=settings.supabase_jwt_secret,
                                 timeout=settings.idp_timeout)
    profiles = ProfileStore(SessionLocal)
    codec = SessionCodec(settings.cookie_name, secure=settings.secure,
                         samesite=settings.samesite, domain=settings.domain)
    gateway = AuthorizationGateway(codec, idp, profiles)

    app = FastAPI(
        title='catalog-admin',
        version=__version__,
        root_path=settings.root_path,
        settings=settings,
        engine=engine,
        SessionLocal=SessionLocal,
        idp=idp,
        profiles=profiles,
        session_codec=codec,
        gateway=gateway,
    )

    logger.info("cors origins: %s", ",".join(settings.cors_origins))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CatalogError, catalog_error)
    app.add_exception_handler(Exception, unexpected_error)

    app.include_router(auth_router)
    app.include_router(product_router)

    @app.middleware("http")
    async def apply_response_headers(request: Request, call_next: Callable) -> Response:
        """Apply response headers to all responses."""
        response: Response = await call_next(request)
        return frame_guard(response)

    @app.get("/")
    async def root(request: Request):
        return {'service': 'catalog-admin', 'version': __version__}

    return app
