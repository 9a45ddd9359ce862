from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from photospot.config import settings
from photospot.database import create_tables, async_session
from photospot.seed import seed_data
from photospot.routers.auth import router as auth_router
from photospot.routers.photos import router as photos_router
from photospot.utils.exceptions import register_exception_handlers
from photospot.utils.response import success_response

SERVICE_NAME = "photospot-api"
VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    if settings.seed_demo_data:
        async with async_session() as session:
            await seed_data(session)
    yield


app = FastAPI(
    title="PhotoSpot API",
    description="Browse geotagged photos on a map",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix="/api")
app.include_router(photos_router, prefix="/api")


@app.get("/health")
async def health_check():
    return success_response(data={"service": SERVICE_NAME, "version": VERSION})
