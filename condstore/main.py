from fastapi import FastAPI
import logging

from condstore.api.routes import router
from condstore.config import get_log_level
from condstore.singleton import init_store

app = FastAPI(title="condstore", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=get_log_level())
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    store = init_store()
    logger.info("Conditions store ready (strict prefixes: %s)", store.strict_prefixes)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "condstore", "version": "0.1.0"}
