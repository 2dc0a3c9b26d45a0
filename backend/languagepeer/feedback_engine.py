"""
Personality Feedback Engine
===========================

Turns one learner utterance into an ordered list of feedback items using the
pattern tables in ``rules``. The engine holds no per-call state: the rule
tables are shared read-only and the only non-deterministic operation,
``compose_encouragement``, draws from an injectable random source.

Checks always run in this order, each contributing at most one item:

1. grammar (``correction``)
2. vocabulary precision (``vocabulary-tip``)
3. structure (``suggestion``)
4. good practice acknowledgment (``encouragement``)

The order is the order learners see the points in, and the Learning Points
section numbers them the same way.
"""

from __future__ import annotations

import logging
import random
from typing import List, Mapping, Optional, Sequence

from . import rules as R
from .rules import FeedbackRules
from .schemas import FeedbackItem, GrammarIssue, ProficiencyLevel, VocabularyIssue

logger = logging.getLogger(__name__)


class FeedbackEngine:
	def __init__(
		self,
		rules: FeedbackRules = R.STRICT_TEACHER_RULES,
		*,
		encouragements: Sequence[str] = (),
		topics: Mapping[str, str] = R.STRICT_TEACHER_TOPICS,
		rng: Optional[random.Random] = None,
	) -> None:
		self.rules = rules
		self.encouragements = tuple(encouragements)
		self.topics = topics
		self._rng = rng or random.Random()

	@classmethod
	def for_personality(cls, personality, *, rng: Optional[random.Random] = None) -> "FeedbackEngine":
		return cls(
			personality.feedback_rules,
			encouragements=personality.encouragements,
			topics=personality.topics,
			rng=rng,
		)

	# ---- Public operations ----

	def analyze_utterance(self, utterance: Optional[str], *, session_id: str = "", message_id: str = "") -> List[FeedbackItem]:
		"""Run every check against ``utterance`` and return the feedback items found.

		An empty list is the normal "nothing to say" outcome; this never raises
		for string input.
		"""
		if not utterance:
			return []
		text = str(utterance)
		found: List[tuple[str, str]] = []

		grammar = self.check_grammar(text)
		if grammar:
			found.append(("correction", self.compose_grammar_feedback(grammar)))

		vocabulary = self.check_vocabulary(text)
		if vocabulary:
			found.append(("vocabulary-tip", self.compose_vocabulary_feedback(vocabulary)))

		if self.needs_structure_improvement(text):
			found.append(("suggestion", R.STRUCTURE_FEEDBACK))

		if self.detect_good_practices(text):
			found.append(("encouragement", self.compose_precision_encouragement(text)))

		if found:
			logger.debug("utterance matched checks: %s", [kind for kind, _ in found])
		return [
			FeedbackItem(session_id=session_id, message_id=message_id, type=kind, content=content)
			for kind, content in found
		]

	def propose_next_topic(self, level: Optional[str | ProficiencyLevel] = None) -> str:
		key = level.value if isinstance(level, ProficiencyLevel) else level
		if isinstance(key, str) and key != "default" and key in self.topics:
			return self.topics[key]
		return self.topics["default"]

	def compose_encouragement(self) -> str:
		if not self.encouragements:
			return ""
		return self._rng.choice(self.encouragements)

	def structure_response(self, content: str, feedback: Sequence[FeedbackItem]) -> str:
		"""Append a numbered Learning Points section for ``feedback`` to ``content``."""
		if not feedback:
			return content
		structured = content + R.LEARNING_POINTS_HEADER
		for index, item in enumerate(feedback, start=1):
			structured += f"{index}. {item.content}\n"
		return structured + R.LEARNING_POINTS_FOOTER

	# ---- Grammar ----

	def check_grammar(self, text: str) -> List[GrammarIssue]:
		rules = self.rules
		issues: List[GrammarIssue] = []
		if rules.subject_verb is not None and rules.subject_verb.search(text):
			issues.append(_issue(R.SUBJECT_VERB_ISSUE))
		if self._has_tense_inconsistency(text):
			issues.append(_issue(R.TENSE_ISSUE))
		if any(p.search(text) for p in rules.article_patterns):
			issues.append(_issue(R.ARTICLE_ISSUE))
		fixes = [fix for fix in rules.preposition_fixes if fix.pattern.search(text)]
		if fixes:
			category, issue, rule = R.PREPOSITION_ISSUE
			corrections = "; ".join(f'use "{fix.right}" instead of "{fix.wrong}"' for fix in fixes)
			issues.append(GrammarIssue(type=category, issue=issue, rule=f"{rule} ({corrections})"))
		return issues

	def _has_tense_inconsistency(self, text: str) -> bool:
		# Short-text heuristic only; longer passages legitimately mix tenses
		markers = self.rules.tense_markers
		if not markers or len(text) >= self.rules.tense_max_length:
			return False
		return sum(1 for p in markers if p.search(text)) > 1

	@staticmethod
	def compose_grammar_feedback(issues: Sequence[GrammarIssue]) -> str:
		feedback = R.GRAMMAR_HEADER
		for index, issue in enumerate(issues, start=1):
			feedback += f"{index}. {issue.issue}: {issue.rule}\n"
		return feedback + R.GRAMMAR_FOOTER

	# ---- Vocabulary ----

	def check_vocabulary(self, text: str) -> List[VocabularyIssue]:
		# One entry per rule, however often the word occurs
		return [
			VocabularyIssue(word=rule.word, suggestion=rule.suggestion, reason=rule.reason)
			for rule in self.rules.vocabulary
			if rule.pattern.search(text)
		]

	@staticmethod
	def compose_vocabulary_feedback(issues: Sequence[VocabularyIssue]) -> str:
		feedback = R.VOCABULARY_HEADER
		for index, issue in enumerate(issues, start=1):
			feedback += f'{index}. "{issue.word}" - {issue.reason}. Consider: {issue.suggestion}\n'
		return feedback + R.VOCABULARY_FOOTER

	# ---- Structure ----

	def needs_structure_improvement(self, text: str) -> bool:
		rules = self.rules
		if rules.max_sentence_tokens is not None:
			sentences = [s for s in R.SENTENCE_SPLIT.split(text) if s.strip()]
			if any(len(s.split(" ")) > rules.max_sentence_tokens for s in sentences):
				return True
		if rules.connectives is not None and len(text) > rules.connective_min_length:
			return rules.connectives.search(text) is None
		return False

	# ---- Good practice ----

	def detect_good_practices(self, text: str) -> bool:
		return any(p.search(text) for p in self.rules.good_practices)

	def compose_precision_encouragement(self, text: str) -> str:
		rules = self.rules
		if rules.connector_praise is not None and rules.connector_praise.search(text):
			return R.CONNECTOR_PRAISE
		if rules.precision_praise is not None and rules.precision_praise.search(text):
			return R.PRECISION_PRAISE
		return R.GENERIC_PRAISE


def _issue(entry: tuple[str, str, str]) -> GrammarIssue:
	category, issue, rule = entry
	return GrammarIssue(type=category, issue=issue, rule=rule)
