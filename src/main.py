import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.core.authority import AuthorityFactory
from src.core.settings import settings
from src.domains.access.routes import router as access_router
from src.domains.invitations.routes import router as invitations_router
from src.domains.organizations.routes import router as organizations_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup: build the authority so misconfiguration fails fast
    app.state.authority = AuthorityFactory(settings).create()
    logger.info(
        f"Using {type(app.state.authority).__name__} ({settings.AUTHORITY_BACKEND})"
    )
    yield


app = FastAPI(
    title="Org Access API",
    description="Organization membership, permission and invitation API",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL] if settings.FRONTEND_URL else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(access_router, prefix="/api/v1")
app.include_router(invitations_router, prefix="/api/v1")
app.include_router(organizations_router, prefix="/api/v1")


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": "Org Access API is running"}


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}
