from __future__ import annotations
import logging
from datetime import datetime, timedelta
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .models import ConversationMessageRow, ConversationSession, FeedbackRecord

logger = logging.getLogger(__name__)


def purge_stale_sessions(db: Session, days: int = 7) -> int:
	"""Delete sessions not updated within ``days`` along with their messages and feedback."""
	threshold = datetime.utcnow() - timedelta(days=days)
	stale = select(ConversationSession.session_id).where(ConversationSession.updated_at < threshold)
	removed = 0
	for model in (FeedbackRecord, ConversationMessageRow):
		res = db.execute(delete(model).where(model.session_id.in_(stale)))
		removed += res.rowcount or 0
	res = db.execute(delete(ConversationSession).where(ConversationSession.updated_at < threshold))
	removed += res.rowcount or 0
	db.commit()
	if removed:
		logger.info("purged %d stale conversation rows older than %d days", removed, days)
	return removed
