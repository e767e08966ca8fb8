import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from app.api import pages
from app.api.api import api_router
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.services.upload_storage import upload_storage
from app.services.weather_client import weather_client
from app.utils import logger as _  # noqa: F401 - Import to configure logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.upload_storage = upload_storage.ensure()
    logger.info("Starting %s version v%s", settings.PROJECT_NAME, settings.VERSION)
    yield
    await weather_client.close()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.PROJECT_DESCRIPTION,
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    session_cookie=settings.SESSION_COOKIE_NAME,
    max_age=settings.SESSION_MAX_AGE,
    same_site="lax",
    https_only=settings.SESSION_HTTPS_ONLY,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Change this to specific origins in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Uploaded images; the directory is created in lifespan
app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=str(upload_storage.directory), check_dir=False),
    name="uploads",
)

app.include_router(pages.router)
app.include_router(api_router, prefix=settings.API_STR)
