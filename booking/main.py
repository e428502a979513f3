# booking/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text

from booking.config import get_settings
from booking.db.session import engine
from booking.logging_config import setup_logging
from booking.models import Base
from booking.routers import events as events_router
from booking.routers import meetings as meetings_router

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# Routers
app.include_router(events_router.router)
app.include_router(meetings_router.router)


@app.get("/health")
def health_check():
    db_status = "ok"
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        db_status = "error"

    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "app": settings.APP_NAME,
        "env": settings.ENV,
        "database": db_status,
    }
