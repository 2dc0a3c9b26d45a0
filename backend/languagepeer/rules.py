"""
Feedback rule tables
====================

Immutable pattern tables and canned strings used by the feedback engine.
Everything here is compiled once at import time and only ever read afterwards,
so a single ``FeedbackRules`` instance can be shared by any number of engines
and requests.

The thresholds (25 tokens per sentence, 100 characters) are heuristics kept
exactly as the strict teacher personality has always applied them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Pattern, Tuple


def _word(pattern: str) -> Pattern[str]:
	return re.compile(rf"\b(?:{pattern})\b", re.IGNORECASE)


@dataclass(frozen=True)
class PrepositionFix:
	pattern: Pattern[str]
	wrong: str
	right: str


@dataclass(frozen=True)
class VocabularyRule:
	word: str
	suggestion: str
	reason: str
	pattern: Pattern[str]


@dataclass(frozen=True)
class FeedbackRules:
	"""Bundle of everything the engine needs to analyse one utterance.

	The default instance carries no checks at all, which is what the
	conversation-only personalities use.
	"""
	subject_verb: Optional[Pattern[str]] = None
	# past, present, future marker patterns; flagged when more than one is present
	tense_markers: Tuple[Pattern[str], ...] = ()
	tense_max_length: int = 100
	article_patterns: Tuple[Pattern[str], ...] = ()
	preposition_fixes: Tuple[PrepositionFix, ...] = ()
	vocabulary: Tuple[VocabularyRule, ...] = ()
	max_sentence_tokens: Optional[int] = None
	connective_min_length: int = 100
	connectives: Optional[Pattern[str]] = None
	good_practices: Tuple[Pattern[str], ...] = ()
	connector_praise: Optional[Pattern[str]] = None
	precision_praise: Optional[Pattern[str]] = None


SENTENCE_SPLIT = re.compile(r"[.!?]+")

STRICT_TEACHER_RULES = FeedbackRules(
	subject_verb=re.compile(r"\b(he|she|it)\s+(don't|have|are)\b", re.IGNORECASE),
	tense_markers=(
		_word("was|were|had|did|went|came|saw"),
		_word("is|are|have|do|go|come|see"),
		_word("will|going to"),
	),
	tense_max_length=100,
	article_patterns=(
		_word("go to school|go to work|play piano|speak english"),
		_word("a university"),
		_word("an hour"),
	),
	preposition_fixes=(
		PrepositionFix(_word("depends of"), "depends of", "depends on"),
		PrepositionFix(_word("listening music"), "listening music", "listening to music"),
		PrepositionFix(_word("married with"), "married with", "married to"),
		PrepositionFix(_word("different than"), "different than", "different from"),
	),
	vocabulary=(
		VocabularyRule("thing", "object, item, matter, issue", "Too vague for precise communication", _word("thing")),
		VocabularyRule("stuff", "materials, items, belongings", "Informal and imprecise", _word("stuff")),
		VocabularyRule("a lot", "many, numerous, frequently", "Informal; use specific quantifiers", _word("a lot")),
		VocabularyRule("really", "extremely, significantly, considerably", "Overused intensifier", _word("really")),
	),
	max_sentence_tokens=25,
	connective_min_length=100,
	# Substring match, not word-bounded
	connectives=re.compile(r"however|therefore|furthermore|moreover|consequently", re.IGNORECASE),
	good_practices=(
		_word("although|however|therefore|furthermore"),
		_word("specifically|particularly|especially"),
		re.compile(r"[.!?]\s+[A-Z]"),
	),
	connector_praise=_word("although|however|therefore"),
	precision_praise=_word("specifically|particularly"),
)

NO_RULES = FeedbackRules()


# ---- Composed text ----

GRAMMAR_HEADER = "I need to address several grammatical points:\n\n"
GRAMMAR_FOOTER = "\nPlease review these rules and apply them in your next response. Accuracy is essential for clear communication."

SUBJECT_VERB_ISSUE = ("subject-verb-agreement", "Third person singular verb form", 'Use "doesn\'t", "has", "is" with he/she/it')
TENSE_ISSUE = ("tense-consistency", "Mixed tenses in sentence", "Maintain consistent tense throughout related clauses")
ARTICLE_ISSUE = ("article-usage", "Incorrect or missing articles", 'Use "a/an" for singular countable nouns, "the" for specific references')
PREPOSITION_ISSUE = ("preposition-usage", "Incorrect preposition choice", "Prepositions must match their specific contexts and meanings")

VOCABULARY_HEADER = "Vocabulary precision points:\n\n"
VOCABULARY_FOOTER = "\nPrecise vocabulary demonstrates advanced language competency."

STRUCTURE_FEEDBACK = (
	"Your ideas are good, but the structure needs improvement. Consider:\n"
	"1. Break long sentences into shorter, clearer ones\n"
	"2. Use transitional phrases to connect ideas\n"
	"3. Organize thoughts in logical sequence\n"
	"Clear structure enhances communication effectiveness."
)

CONNECTOR_PRAISE = "Excellent use of transitional phrases. This demonstrates sophisticated language control."
PRECISION_PRAISE = "Good precision in your language choice. This level of specificity is commendable."
GENERIC_PRAISE = "I notice improved attention to grammatical accuracy. Continue this systematic approach."

LEARNING_POINTS_HEADER = "\n\n--- Learning Points ---\n"
LEARNING_POINTS_FOOTER = "\nApply these points in your next response."


# ---- Next topic tables, keyed by proficiency level ("default" for unset/unknown) ----

STRICT_TEACHER_TOPICS: Mapping[str, str] = MappingProxyType({
	"beginner": "Let's focus on mastering basic sentence structures. We'll practice subject-verb-object patterns with present tense verbs.",
	"intermediate": "I suggest we work on complex sentence construction using subordinate clauses. This will strengthen your grammatical foundation.",
	"advanced": "Let's practice formal register and academic language. We'll focus on precise vocabulary and sophisticated grammatical structures.",
	"default": "Based on your current performance, I recommend we focus on areas that need systematic improvement. Shall we review your recent errors and create a targeted practice plan?",
})

GENERIC_TOPICS: Mapping[str, str] = MappingProxyType({
	"default": "Would you like to practice a different topic?",
})
