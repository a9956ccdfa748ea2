from fastapi import FastAPI
from ridebook.routes.booking_router import booking_router
from ridebook.routes.trip_router import trip_router
from contextlib import asynccontextmanager
from ridebook.core.config import settings
from ridebook.core.logger import get_logger
from ridebook.core.middleware import log_requests
from fastapi.middleware.cors import CORSMiddleware

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):

    logger.info(f"{settings.app_name} startup complete")

    yield

    logger.info(f"{settings.app_name} shutdown initiated")

app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)
app.include_router(booking_router)
app.include_router(trip_router)
