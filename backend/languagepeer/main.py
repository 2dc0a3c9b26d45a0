import asyncio
import logging

from fastapi import FastAPI

from .db import Base, engine, get_db
from .cleanup import purge_stale_sessions
from .settings import settings
from .routers import health
from .routers import personalities
from .routers import feedback
from .routers import conversations

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="LanguagePeer API")
app.include_router(health.router)
app.include_router(personalities.router)
app.include_router(feedback.router)
app.include_router(conversations.router)


@app.get("/info")
def root():
	return {
		"status": "ok",
		"bedrock_configured": bool(settings.bedrock_api_key),
		"default_personality": settings.default_personality,
	}


def _purge_once() -> None:
	db = next(get_db())
	try:
		purge_stale_sessions(db, settings.session_retention_days)
	except Exception:
		logger.exception("stale session cleanup failed")
	finally:
		db.close()


async def _cleanup_watcher():
	while True:
		await asyncio.sleep(24 * 60 * 60)
		_purge_once()


@app.on_event("startup")
async def startup_event():
	Base.metadata.create_all(bind=engine)
	_purge_once()
	asyncio.create_task(_cleanup_watcher())
