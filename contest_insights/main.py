# contest_insights/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from contest_insights import config
from contest_insights.database import open_database
from contest_insights.routers.analytics import router as analytics_router
from contest_insights.routers.debug import router as debug_router
from contest_insights.routers.health import router as health_router
from contest_insights.routers.rejections import router as rejections_router

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # a failed connection aborts startup
    client, db = open_database()
    app.state.db = db
    try:
        yield
    finally:
        client.close()


app = FastAPI(
    title="Contest Insights API",
    description="Rejection and contest-funnel statistics with LLM-written narratives",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(rejections_router)
app.include_router(analytics_router)
app.include_router(debug_router)
app.include_router(health_router)
