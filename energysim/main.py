import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from energysim.api import auth, history, routes, wizard
from energysim.core.config import FRONTEND_ORIGINS
from energysim.core.database import init_db
from energysim.core.logging import configure_logging
from energysim.tasks import monitor

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    if monitor.start():
        logger.info("Simulation service monitor started")
    yield
    monitor.stop()


app = FastAPI(title="Building Energy Simulator API", lifespan=lifespan)

origins = [o.strip() for o in FRONTEND_ORIGINS.split(",") if o.strip()]

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(routes.router)
app.include_router(auth.router)
app.include_router(wizard.router)
app.include_router(history.router)
