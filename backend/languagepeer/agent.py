"""
Personality agent
=================

Wraps one personality around the hosted model: builds the system prompt from
the personality and the learner's apparent mood, asks the model for a reply,
and attaches rule-based feedback, voice instructions and (sometimes) a next
topic suggestion.

Model failures never reach the caller; they are logged and replaced with the
personality's fallback reply.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from .emotional_state import analyze_emotional_state, approach_mode, emotional_tone, should_suggest_topic
from .feedback_engine import FeedbackEngine
from .llm_client import LLMClient
from .personalities import STRICT_TEACHER, AgentPersonality
from .schemas import (
	AgentResponse,
	AudioInstructions,
	ConversationContext,
	EmotionalState,
	MotivationalMessage,
	ProgressMetrics,
)
from .settings import settings
from .speech import extract_emphasis_words, generate_ssml

logger = logging.getLogger(__name__)


FALLBACK_REPLY = "I'm sorry, I'm having trouble right now. Let's try again in a moment."

_APPROACH_ADDENDA = {
	"extra-supportive": "\n\nIMPORTANT: The student seems frustrated. Be extra patient, encouraging, and break down concepts into smaller, easier steps. Focus on building confidence.",
	"challenging": "\n\nIMPORTANT: The student seems confident. You can provide more challenging exercises and advanced concepts while maintaining encouragement.",
	"engaging": "\n\nIMPORTANT: The student seems disengaged. Try to re-engage them with interesting topics, questions, or interactive exercises.",
}


class PersonalityAgent:
	def __init__(
		self,
		personality: AgentPersonality,
		*,
		llm: Optional[LLMClient] = None,
		engine: Optional[FeedbackEngine] = None,
		rng: Optional[random.Random] = None,
	) -> None:
		self.personality = personality
		self.llm = llm
		self.engine = engine or FeedbackEngine.for_personality(personality, rng=rng)

	async def generate_supportive_response(self, context: ConversationContext) -> AgentResponse:
		history = context.conversation_history
		state = analyze_emotional_state(history)
		user_message = history[-1].content if history else ""
		try:
			llm = self.llm or LLMClient()
			try:
				content = await llm.generate(
					self.build_system_prompt(state),
					user_message,
					history=[("assistant" if m.sender == "agent" else "user", m.content) for m in history[:-1]],
				)
			finally:
				if self.llm is None:
					await llm.aclose()
		except Exception:
			logger.exception("response generation failed for session %s", context.session_id)
			return self.fallback_response()

		feedback = self.contextual_feedback(context)
		if self.personality.id == STRICT_TEACHER:
			content = self.engine.structure_response(content, feedback)

		response = AgentResponse(
			content=content,
			audio_instructions=self.audio_instructions(content),
			emotional_tone=emotional_tone(state),
			feedback=feedback,
		)
		if should_suggest_topic(len(history), state, settings.topic_suggestion_threshold):
			level = context.user_profile.current_level if context.user_profile else None
			response.next_topic_suggestion = self.engine.propose_next_topic(level)
		return response

	def contextual_feedback(self, context: ConversationContext):
		"""Feedback for the learner's most recent message, or nothing if they have not spoken yet."""
		last_user = next((m for m in reversed(context.conversation_history) if m.sender == "user"), None)
		if last_user is None:
			return []
		return self.engine.analyze_utterance(
			last_user.content,
			session_id=context.session_id,
			message_id=last_user.message_id,
		)

	def build_system_prompt(self, state: EmotionalState) -> str:
		p = self.personality
		prompt = p.system_prompt + _APPROACH_ADDENDA.get(approach_mode(state), "")
		prompt += f"\n\nPersonality Traits: {', '.join(p.traits)}"
		prompt += f"\nConversation Style: {p.conversation_style}"
		prompt += f"\nError Handling Approach: {p.supportive_approach.error_handling}"
		prompt += f"\nEncouragement Frequency: {p.supportive_approach.encouragement_frequency}"
		return prompt

	def audio_instructions(self, content: str) -> AudioInstructions:
		voice = self.personality.voice_characteristics
		return AudioInstructions(
			voice_id=voice.voice_id,
			ssml=generate_ssml(content, voice),
			emphasis=extract_emphasis_words(content),
		)

	def provide_encouragement(self, progress: ProgressMetrics) -> MotivationalMessage:
		if progress.sessions_completed > 0 and progress.sessions_completed % 5 == 0:
			n = progress.sessions_completed
			return MotivationalMessage(
				type="milestone",
				message=f"Congratulations! You've completed {n} practice sessions. That's fantastic dedication!",
				personalized_elements=[f"{n} sessions milestone"],
			)
		if progress.overall_improvement > 0.1:
			pct = round(progress.overall_improvement * 100)
			return MotivationalMessage(
				type="progress",
				message=f"Great progress! You've improved by {pct}% since you started. Keep up the excellent work!",
				personalized_elements=[f"{pct}% improvement"],
			)
		if progress.streak_days > 1:
			days = progress.streak_days
			return MotivationalMessage(
				type="encouragement",
				message=f"Amazing! You're on a {days}-day practice streak. Consistency is key to language learning success!",
				personalized_elements=[f"{days}-day streak"],
			)
		return MotivationalMessage(
			type="reassurance",
			message=self.engine.compose_encouragement(),
			personalized_elements=["personality-based encouragement"],
		)

	def fallback_response(self) -> AgentResponse:
		return AgentResponse(
			content=FALLBACK_REPLY,
			emotional_tone="encouraging",
			audio_instructions=AudioInstructions(voice_id=self.personality.voice_characteristics.voice_id),
		)
