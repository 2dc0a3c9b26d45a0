from __future__ import annotations
from typing import List, Sequence

from .schemas import ConversationMessage, EmotionalState, FrustrationLevel


_FRUSTRATION_WORDS = ("difficult", "hard", "confused", "don't understand")
_CONFIDENCE_WORDS = ("think", "maybe", "correct")
_ENGAGEMENT_WORDS = ("?", "how", "why", "what")


def _user_messages(history: Sequence[ConversationMessage]) -> List[ConversationMessage]:
	return [m for m in history if m.sender == "user"]


def analyze_emotional_state(history: Sequence[ConversationMessage]) -> EmotionalState:
	"""Score frustration, confidence and engagement over the last five messages."""
	recent = _user_messages(list(history)[-5:])
	frustration = confidence = engagement = 0
	for message in recent:
		content = message.content.lower()
		if any(w in content for w in _FRUSTRATION_WORDS):
			frustration += 1
		if any(w in content for w in _CONFIDENCE_WORDS) or len(content) > 50:
			confidence += 1
		if any(w in content for w in _ENGAGEMENT_WORDS):
			engagement += 1
	total = len(recent) or 1
	return EmotionalState(
		frustration_level=min(frustration / total, 1),
		confidence_level=min(confidence / total, 1),
		engagement_level=min(engagement / total, 1),
	)


def approach_mode(state: EmotionalState) -> str:
	if state.frustration_level > 0.6:
		return "extra-supportive"
	if state.confidence_level > 0.7:
		return "challenging"
	if state.engagement_level < 0.3:
		return "engaging"
	return "default"


def emotional_tone(state: EmotionalState) -> str:
	if state.frustration_level > 0.6:
		return "encouraging"
	if state.confidence_level > 0.7:
		return "enthusiastic"
	if state.engagement_level < 0.3:
		return "encouraging"
	return "neutral"


def detect_frustration(history: Sequence[ConversationMessage]) -> FrustrationLevel:
	recent = _user_messages(history)[-3:]
	indicators: List[str] = []
	score = 0.0
	for message in recent:
		content = message.content.lower()
		if "difficult" in content or "hard" in content:
			indicators.append("Expressing difficulty")
			score += 0.3
		if "confused" in content or "don't understand" in content:
			indicators.append("Expressing confusion")
			score += 0.4
		if "give up" in content or "too hard" in content:
			indicators.append("Expressing desire to quit")
			score += 0.5
		if len(content) < 10 and len(recent) > 1:
			indicators.append("Short responses indicating disengagement")
			score += 0.2
		if message.transcription_confidence is not None and message.transcription_confidence < 0.5:
			indicators.append("Low transcription confidence (possible speech issues)")
			score += 0.2

	actions: List[str] = []
	if score > 0.6:
		actions = [
			"Provide extra encouragement and patience",
			"Suggest taking a short break",
			"Switch to easier topics or exercises",
		]
	elif score > 0.3:
		actions = [
			"Offer additional explanations",
			"Provide more examples",
			"Check if user needs clarification",
		]
	return FrustrationLevel(level=min(score, 1), indicators=indicators, recommended_actions=actions)


def should_suggest_topic(history_length: int, state: EmotionalState, threshold: int = 20) -> bool:
	return history_length > threshold or state.engagement_level < 0.3
