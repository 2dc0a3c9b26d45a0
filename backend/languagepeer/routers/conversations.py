"""
Conversation endpoints
======================

Create a practice session with one personality, post learner messages to it,
and read back the transcript with every feedback item the strict teacher (or
any rule-backed personality) produced along the way.

Each posted message runs the personality agent, then persists the learner
message, the agent reply and the feedback items in the order they were
produced.
"""

from __future__ import annotations
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ..agent import PersonalityAgent
from ..db import get_db
from ..llm_client import LLMClient
from ..models import ConversationMessageRow, ConversationSession, FeedbackRecord
from ..personalities import get_personality
from ..schemas import (
	AgentResponse,
	ConversationContext,
	ConversationMessage,
	FeedbackItem,
	ProficiencyLevel,
	UserProfile,
	new_id,
)
from ..settings import settings


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])


class StartRequest(BaseModel):
	user_id: str = ""
	personality: Optional[str] = None
	proficiency_level: Optional[ProficiencyLevel] = None
	topic: Optional[str] = None


class SessionOut(BaseModel):
	session_id: str
	user_id: str
	personality: str
	proficiency_level: Optional[str] = None
	current_topic: Optional[str] = None
	status: str
	messages: List[ConversationMessage] = Field(default_factory=list)
	feedback: List[FeedbackItem] = Field(default_factory=list)


class MessageRequest(BaseModel):
	content: str
	transcription_confidence: Optional[float] = Field(default=None, ge=0, le=1)


class MessageResponse(BaseModel):
	message_id: str
	response: AgentResponse


def get_llm_client() -> Optional[LLMClient]:
	# None lets each agent open (and close) its own client per request
	return None


def _load(db: Session, session_id: str) -> ConversationSession:
	row = db.get(ConversationSession, session_id)
	if row is None:
		raise HTTPException(status_code=404, detail="session not found")
	return row


def _message(row: ConversationMessageRow) -> ConversationMessage:
	return ConversationMessage(
		message_id=row.message_id,
		session_id=row.session_id,
		sender=row.sender,
		content=row.content,
		timestamp=row.timestamp,
		transcription_confidence=row.transcription_confidence,
	)


def _session_out(row: ConversationSession) -> SessionOut:
	return SessionOut(
		session_id=row.session_id,
		user_id=row.user_id,
		personality=row.personality_id,
		proficiency_level=row.proficiency_level,
		current_topic=row.current_topic,
		status=row.status,
		messages=[_message(m) for m in row.messages],
		feedback=[
			FeedbackItem(
				feedback_id=f.feedback_id,
				session_id=f.session_id,
				message_id=f.message_id,
				type=f.type,
				content=f.content,
				delivered_at=f.delivered_at,
			)
			for f in row.feedback
		],
	)


@router.post("", response_model=SessionOut)
def start(req: StartRequest, db: Session = Depends(get_db)):
	personality_id = req.personality or settings.default_personality
	try:
		get_personality(personality_id)
	except KeyError:
		raise HTTPException(status_code=404, detail="personality not found")
	row = ConversationSession(
		session_id=new_id(),
		user_id=req.user_id,
		personality_id=personality_id,
		proficiency_level=req.proficiency_level.value if req.proficiency_level else None,
		current_topic=req.topic,
	)
	db.add(row)
	db.commit()
	db.refresh(row)
	logger.info("started session %s with %s", row.session_id, personality_id)
	return _session_out(row)


@router.get("/{session_id}", response_model=SessionOut)
def read(session_id: str, db: Session = Depends(get_db)):
	return _session_out(_load(db, session_id))


@router.post("/{session_id}/messages", response_model=MessageResponse)
async def post_message(
	session_id: str,
	req: MessageRequest,
	db: Session = Depends(get_db),
	llm: Optional[LLMClient] = Depends(get_llm_client),
):
	text = (req.content or "").strip()
	if not text:
		raise HTTPException(status_code=400, detail="content is required")
	row = _load(db, session_id)
	if row.status != "active":
		raise HTTPException(status_code=409, detail=f"session is {row.status}")

	user_message = ConversationMessage(
		session_id=session_id,
		sender="user",
		content=text,
		transcription_confidence=req.transcription_confidence,
	)
	context = ConversationContext(
		session_id=session_id,
		user_id=row.user_id,
		conversation_history=[_message(m) for m in row.messages] + [user_message],
		user_profile=UserProfile(user_id=row.user_id, current_level=row.proficiency_level),
		current_topic=row.current_topic,
	)
	agent = PersonalityAgent(get_personality(row.personality_id), llm=llm)
	response = await agent.generate_supportive_response(context)

	db.add(ConversationMessageRow(
		message_id=user_message.message_id,
		session_id=session_id,
		sender="user",
		content=text,
		transcription_confidence=req.transcription_confidence,
	))
	db.add(ConversationMessageRow(message_id=new_id(), session_id=session_id, sender="agent", content=response.content))
	for item in response.feedback:
		db.add(FeedbackRecord(
			feedback_id=item.feedback_id,
			session_id=session_id,
			message_id=item.message_id,
			type=item.type,
			content=item.content,
			delivered_at=item.delivered_at,
		))
	if response.next_topic_suggestion:
		row.current_topic = response.next_topic_suggestion
	row.updated_at = datetime.utcnow()
	db.commit()
	return MessageResponse(message_id=user_message.message_id, response=response)


@router.post("/{session_id}/complete", response_model=SessionOut)
def complete(session_id: str, db: Session = Depends(get_db)):
	row = _load(db, session_id)
	row.status = "completed"
	db.commit()
	db.refresh(row)
	return _session_out(row)
