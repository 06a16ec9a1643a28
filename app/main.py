"""FastAPI application — main entry point."""

import structlog
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.infrastructure.database import engine, Base, SessionLocal
from app.core.logging import configure_logging
from app.core.middleware import setup_middleware
from app.core.exceptions import AppError, global_exception_handler

# Import all models so SQLAlchemy knows about them
from app.domain.models.user import User
from app.domain.models.project import ResearchProject
from app.domain.models.domain import Domain
from app.domain.models.app_config import AppConfig

from app.application.services.auth_service import ensure_default_admin
from app.application.services.config_service import ensure_config
from app.infrastructure.repositories.domain_repository import SQLAlchemyAppConfigRepository
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository

# Import routers
from app.interfaces.api.auth import router as auth_router
from app.interfaces.api.projects import router as projects_router
from app.interfaces.api.admin import router as admin_router
from app.interfaces.api.manager import router as manager_router
from app.interfaces.api.candidate import router as candidate_router
from app.interfaces.api.domains import router as domains_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)


def bootstrap_database() -> None:
    """Create tables, the settings row and the default admin account."""
    # No migrations: tables are created from the models
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    db = SessionLocal()
    try:
        ensure_config(SQLAlchemyAppConfigRepository(db, AppConfig))
        admin = ensure_default_admin(
            SQLAlchemyUserRepository(db, User),
            settings.DEFAULT_ADMIN_EMAIL,
            settings.DEFAULT_ADMIN_PASSWORD,
        )
        if admin:
            logger.info("Default admin user created", email=admin.email)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    logger.info("Starting research project tracker", env=settings.ENVIRONMENT)
    bootstrap_database()

    yield

    logger.info("Research project tracker stopped")


app = FastAPI(
    title="Cartographie des projets de recherche",
    description="API Backend — suivi des projets de recherche, statistiques et rapports PDF",
    version="1.0.0",
    lifespan=lifespan,
)

# Setup Middleware (Correlation ID, Logging)
setup_middleware(app)

# Global Exception Handling
app.add_exception_handler(AppError, global_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Added last so it runs first on the request
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(projects_router)
app.include_router(admin_router)
app.include_router(manager_router)
app.include_router(candidate_router)
app.include_router(domains_router)


@app.get("/")
def root():
    return {
        "name": "Cartographie des projets de recherche",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "healthy"}
