from __future__ import annotations
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


FeedbackType = Literal["correction", "encouragement", "suggestion", "vocabulary-tip", "pronunciation-guide"]
EmotionalTone = Literal["encouraging", "neutral", "corrective", "enthusiastic"]


class ProficiencyLevel(str, Enum):
	BEGINNER = "beginner"
	INTERMEDIATE = "intermediate"
	ADVANCED = "advanced"


def new_id() -> str:
	return uuid.uuid4().hex


def utcnow() -> datetime:
	return datetime.now(timezone.utc)


class GrammarIssue(BaseModel):
	model_config = ConfigDict(frozen=True)

	type: str
	issue: str
	rule: str


class VocabularyIssue(BaseModel):
	model_config = ConfigDict(frozen=True)

	word: str
	suggestion: str
	reason: str


class FeedbackItem(BaseModel):
	"""One discrete piece of feedback attached to a learner message.

	Items are immutable once created; whoever runs the analysis owns them and
	appends them to the session's feedback list.
	"""
	model_config = ConfigDict(frozen=True)

	feedback_id: str = Field(default_factory=new_id)
	session_id: str = ""
	message_id: str = ""
	type: FeedbackType
	content: str
	delivered_at: datetime = Field(default_factory=utcnow)


class ConversationMessage(BaseModel):
	message_id: str = Field(default_factory=new_id)
	session_id: str = ""
	sender: Literal["user", "agent"]
	content: str
	timestamp: datetime = Field(default_factory=utcnow)
	transcription_confidence: Optional[float] = None


class UserProfile(BaseModel):
	user_id: str = ""
	current_level: Optional[str] = None


class ConversationContext(BaseModel):
	session_id: str
	user_id: str = ""
	conversation_history: List[ConversationMessage] = Field(default_factory=list)
	user_profile: Optional[UserProfile] = None
	current_topic: Optional[str] = None


class EmotionalState(BaseModel):
	frustration_level: float = 0.0
	confidence_level: float = 0.0
	engagement_level: float = 0.0
	last_interaction_time: datetime = Field(default_factory=utcnow)


class FrustrationLevel(BaseModel):
	level: float
	indicators: List[str] = Field(default_factory=list)
	recommended_actions: List[str] = Field(default_factory=list)


class ProgressMetrics(BaseModel):
	sessions_completed: int = 0
	overall_improvement: float = 0.0
	streak_days: int = 0


class MotivationalMessage(BaseModel):
	message: str
	type: Literal["encouragement", "milestone", "progress", "reassurance"]
	personalized_elements: List[str] = Field(default_factory=list)


class AudioInstructions(BaseModel):
	voice_id: str
	ssml: Optional[str] = None
	emphasis: List[str] = Field(default_factory=list)


class AgentResponse(BaseModel):
	content: str
	audio_instructions: Optional[AudioInstructions] = None
	feedback: List[FeedbackItem] = Field(default_factory=list)
	emotional_tone: EmotionalTone = "neutral"
	next_topic_suggestion: Optional[str] = None
