from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..feedback_engine import FeedbackEngine
from ..personalities import STRICT_TEACHER, get_personality
from ..schemas import FeedbackItem


router = APIRouter(prefix="/feedback", tags=["feedback"])


class AnalyzeRequest(BaseModel):
	text: str
	personality: str = STRICT_TEACHER
	session_id: str = ""
	message_id: str = ""


class AnalyzeResponse(BaseModel):
	feedback: List[FeedbackItem]
	learning_points: str


class TopicResponse(BaseModel):
	topic: str


def _engine(personality_id: str) -> FeedbackEngine:
	try:
		return FeedbackEngine.for_personality(get_personality(personality_id))
	except KeyError:
		raise HTTPException(status_code=404, detail="personality not found")


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(req: AnalyzeRequest):
	engine = _engine(req.personality)
	items = engine.analyze_utterance(req.text, session_id=req.session_id, message_id=req.message_id)
	return AnalyzeResponse(feedback=items, learning_points=engine.structure_response("", items).strip())


@router.get("/topic", response_model=TopicResponse)
def topic(level: Optional[str] = None, personality: str = STRICT_TEACHER):
	return TopicResponse(topic=_engine(personality).propose_next_topic(level))
