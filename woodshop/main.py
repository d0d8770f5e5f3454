# woodshop/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from woodshop.core.config import Settings, get_settings
from woodshop.core.errors import PartialOrderError, ShopError
from woodshop.routers.cart import router as cart_router
from woodshop.routers.orders import router as orders_router
from woodshop.services.cart_store import CartSessions
from woodshop.store.base import ObjectStore
from woodshop.store.factory import build_object_store

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


async def shop_error_handler(request: Request, exc: ShopError) -> JSONResponse:
    body: dict = {"detail": exc.message}
    if isinstance(exc, PartialOrderError):
        body["order_id"] = exc.order_id
        body["compensated"] = exc.compensated
    return JSONResponse(status_code=exc.status_code, content=body)


def create_app(
    settings: Settings | None = None,
    store: ObjectStore | None = None,
) -> FastAPI:
    """
    Build the API.

    `store` is normally built from settings at startup; tests pass their own.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup:
          - Build the object store (and create tables for the sql backend).
          - Start an empty cart-session registry.

        Shutdown:
          - Carts are in-memory only; they are dropped with the process.
        """
        if store is not None:
            app.state.store = store
        else:
            logger.info("Startup: connecting to %s store...", settings.STORE_BACKEND)
            try:
                app.state.store = build_object_store(settings)
            except Exception as e:
                logger.error(f"Startup: store initialisation FAILED: {e}")
                raise
        app.state.cart_sessions = CartSessions(
            idle_minutes=settings.CART_IDLE_MINUTES,
            max_sessions=settings.CART_MAX_SESSIONS,
        )
        yield

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[settings.CART_SESSION_HEADER],
    )

    app.add_exception_handler(ShopError, shop_error_handler)

    # Versioned API prefix, e.g. /api/v1
    app.include_router(cart_router, prefix=settings.API_V1_STR)
    app.include_router(orders_router, prefix=settings.API_V1_STR)

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "woodshop-backend"}

    return app


app = create_app()
