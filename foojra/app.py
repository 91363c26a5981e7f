import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from foojra.core.config import get_settings
from foojra.core.logging import configure_logging
from foojra.repositories.mock_repository import MockDataRepository
from foojra.routers import menu as menu_router
from foojra.routers import orders as orders_router
from foojra.routers import reviews as reviews_router
from foojra.routers import shops as shops_router
from foojra.routers import users as users_router

logger = logging.getLogger(__name__)


def create_app(repository: MockDataRepository | None = None) -> FastAPI:
    """Factory compatible with uvicorn --factory; tests pass their own repository."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Foojra API")
    app.state.repository = repository or MockDataRepository.from_settings(settings)

    allowed_cors = {settings.frontend_url}
    if settings.app_env != "prod":
        allowed_cors.update({"http://localhost:3000", "http://127.0.0.1:3000"})
    app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted(o for o in allowed_cors if o),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(users_router.router)
    app.include_router(shops_router.router)
    app.include_router(menu_router.router)
    app.include_router(orders_router.router)
    app.include_router(reviews_router.router)
    app.include_router(reviews_router.item_router)

    @app.get("/")
    def root():
        return {"message": "API is running"}

    logger.info("app ready env=%s data_dir=%s", settings.app_env, settings.data_dir)
    return app
