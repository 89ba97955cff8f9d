import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chefbook.api.auth import router as auth_router
from chefbook.api.bookings import router as bookings_router
from chefbook.api.chefs import router as chefs_router
from chefbook.api.health import router as health_router
from chefbook.api.messages import router as messages_router
from chefbook.api.ws import router as ws_router
from chefbook.config import settings
from chefbook.database import engine
from chefbook.errors import ServiceError
from chefbook.models import Base
from chefbook.services.realtime import realtime_manager
from chefbook.tasks.auto_complete import run_auto_complete_loop

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        if settings.RESET_DB:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    task = None
    if settings.BOOKING_AUTO_COMPLETE:
        task = asyncio.create_task(run_auto_complete_loop())
    logger.info("Chefbook API started")
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        await realtime_manager.drain()
        await engine.dispose()


app = FastAPI(title="Chefbook", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(health_router, prefix="/api")
app.include_router(auth_router, prefix="/api")
app.include_router(chefs_router, prefix="/api")
app.include_router(bookings_router, prefix="/api")
app.include_router(messages_router, prefix="/api")
app.include_router(ws_router)


@app.get("/api")
def api_root():
    return {"message": "Chefbook API"}
