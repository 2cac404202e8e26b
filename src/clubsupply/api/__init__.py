"""HTTP surface of clubsupply."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from clubsupply.api.errors import register_error_handlers
from clubsupply.api.routes import account_router, cart_router, inventory_router
from clubsupply.settings import get_settings
from clubsupply.utils.logging import add_context, clear_context


def create_app(domain) -> FastAPI:
    """Build the FastAPI application around an initialized domain."""
    app = FastAPI(
        title="Club Supply API",
        description="Inventory catalog and cart requests for club coordinators",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(get_settings().cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Run every request inside the domain context."""
        add_context(method=request.method, path=request.url.path)
        try:
            with domain.domain_context():
                return await call_next(request)
        finally:
            clear_context()

    @app.get("/health")
    async def health():
        return {"status": "ok", "domain": domain.name}

    register_error_handlers(app)
    app.include_router(account_router)
    app.include_router(inventory_router)
    app.include_router(cart_router)

    return app


__all__ = ["account_router", "cart_router", "create_app", "inventory_router"]
