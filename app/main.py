from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.config import settings
from app.database import create_tables, async_session
from app.dependencies import verify_api_key
from app.seed import seed_data
from app.routers.vehicles import router as vehicles_router
from app.utils.exceptions import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    if settings.seed_on_startup:
        async with async_session() as session:
            await seed_data(session)
    yield


app = FastAPI(
    title="Fleet Manager API",
    description="Vehicle fleet management: plates, status lifecycle and maintenance capacity",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(vehicles_router, prefix="/api", dependencies=[Depends(verify_api_key)])


@app.get("/api/health", response_class=PlainTextResponse)
async def health_check():
    return "Vehicle Management API is up and running!"
