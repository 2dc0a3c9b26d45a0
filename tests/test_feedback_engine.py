import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from languagepeer import rules
from languagepeer.feedback_engine import FeedbackEngine
from languagepeer.personalities import FRIENDLY_TUTOR, STRICT_TEACHER, get_personality
from languagepeer.schemas import FeedbackItem, ProficiencyLevel


def kinds(items):
	return [item.type for item in items]


def test_subject_verb_agreement(engine):
	items = engine.analyze_utterance("He don't like it.")
	assert kinds(items) == ["correction"]
	assert items[0].content == (
		"I need to address several grammatical points:\n\n"
		"1. Third person singular verb form: Use \"doesn't\", \"has\", \"is\" with he/she/it\n"
		"\nPlease review these rules and apply them in your next response. Accuracy is essential for clear communication."
	)


@pytest.mark.parametrize(
	"utterance, corrected",
	[
		("It depends of the weather.", "depends on"),
		("I enjoy listening music.", "listening to music"),
		("My sister got married with a doctor.", "married to"),
		("This book is different than that one.", "different from"),
	],
)
def test_preposition_corrections_name_the_fixed_form(engine, utterance, corrected):
	items = engine.analyze_utterance(utterance)
	correction = next(item for item in items if item.type == "correction")
	assert "Incorrect preposition choice" in correction.content
	assert f'"{corrected}"' in correction.content


def test_multiple_grammar_issues_are_numbered_in_rule_order(engine):
	issues = engine.check_grammar("She have to go to school, it depends of the bus")
	assert [i.type for i in issues] == ["subject-verb-agreement", "article-usage", "preposition-usage"]
	content = engine.compose_grammar_feedback(issues)
	for index, issue in enumerate(issues, start=1):
		assert f"{index}. {issue.issue}: {issue.rule}" in content


def test_tense_mixing_in_short_text(engine):
	items = engine.analyze_utterance("I was going and I go now")
	assert kinds(items) == ["correction"]
	assert "Mixed tenses in sentence" in items[0].content


def test_tense_mixing_boundary_at_one_hundred_characters(engine):
	base = "I was going and I go now "
	just_under = base + "x" * (99 - len(base))
	at_limit = base + "x" * (100 - len(base))
	assert len(just_under) == 99 and len(at_limit) == 100
	assert any(i.type == "tense-consistency" for i in engine.check_grammar(just_under))
	assert not any(i.type == "tense-consistency" for i in engine.check_grammar(at_limit))


def test_padded_tense_mix_is_not_flagged(engine):
	text = "I was going and I go now " + "x" * 90
	items = engine.analyze_utterance(text)
	assert all("Mixed tenses" not in item.content for item in items)


def test_single_vague_word(engine):
	items = engine.analyze_utterance("thing")
	assert kinds(items) == ["vocabulary-tip"]
	assert items[0].content == (
		"Vocabulary precision points:\n\n"
		'1. "thing" - Too vague for precise communication. Consider: object, item, matter, issue\n'
		"\nPrecise vocabulary demonstrates advanced language competency."
	)


def test_repeated_vague_word_reported_once(engine):
	issues = engine.check_vocabulary("thing, thing and another thing")
	assert [i.word for i in issues] == ["thing"]


def test_vocabulary_follows_rule_order(engine):
	issues = engine.check_vocabulary("I really like a lot of stuff")
	assert [i.word for i in issues] == ["stuff", "a lot", "really"]


def test_long_sentence_needs_structure(engine):
	assert not engine.needs_structure_improvement(" ".join(["a"] * 25))
	assert engine.needs_structure_improvement(" ".join(["a"] * 26))


def test_long_text_without_connectives_needs_structure(engine):
	plain = "x" * 101
	assert engine.needs_structure_improvement(plain)
	assert not engine.needs_structure_improvement(plain + " however")
	assert not engine.needs_structure_improvement("x" * 100)


def test_structure_feedback_is_fixed_text(engine):
	items = engine.analyze_utterance(" ".join(["a"] * 30))
	assert kinds(items) == ["suggestion"]
	assert items[0].content == rules.STRUCTURE_FEEDBACK


@pytest.mark.parametrize(
	"utterance, praise",
	[
		("Although tea is nice, coffee is better", rules.CONNECTOR_PRAISE),
		("I specifically asked for tea", rules.PRECISION_PRAISE),
		("I especially like tea", rules.GENERIC_PRAISE),
		("I like tea. You like coffee", rules.GENERIC_PRAISE),
	],
)
def test_good_practice_praise(engine, utterance, praise):
	items = engine.analyze_utterance(utterance)
	encouragement = [item for item in items if item.type == "encouragement"]
	assert len(encouragement) == 1
	assert encouragement[0].content == praise


def test_checks_run_in_fixed_order(engine):
	text = "He don't like stuff, however " + " ".join(["word"] * 25) + " end."
	items = engine.analyze_utterance(text)
	assert kinds(items) == ["correction", "vocabulary-tip", "suggestion", "encouragement"]


@pytest.mark.parametrize("utterance", ["", None, "   ", "!!!???", "12345", "...", "\n\t"])
def test_never_fails_on_empty_or_non_linguistic_input(engine, utterance):
	assert engine.analyze_utterance(utterance) == []


def test_analysis_is_repeatable(engine):
	text = "He don't know the thing. It depends of the weather, specifically."
	first = [(i.type, i.content) for i in engine.analyze_utterance(text)]
	second = [(i.type, i.content) for i in engine.analyze_utterance(text)]
	assert first == second
	assert first


def test_items_carry_session_and_message_ids(engine):
	items = engine.analyze_utterance("thing", session_id="s1", message_id="m1")
	assert items[0].session_id == "s1"
	assert items[0].message_id == "m1"
	assert items[0].feedback_id
	assert isinstance(items[0], FeedbackItem)


def test_feedback_items_are_immutable(engine):
	item = engine.analyze_utterance("thing")[0]
	with pytest.raises(Exception):
		item.content = "changed"


def test_concurrent_calls_are_independent(engine):
	texts = ["He don't like it.", "thing", "I was going and I go now", ""] * 25
	expected = [[(i.type, i.content) for i in engine.analyze_utterance(t)] for t in texts]
	with ThreadPoolExecutor(max_workers=8) as pool:
		results = list(pool.map(lambda t: [(i.type, i.content) for i in engine.analyze_utterance(t)], texts))
	assert results == expected


def test_next_topic_by_level(engine):
	topics = {
		level: engine.propose_next_topic(level)
		for level in ("beginner", "intermediate", "advanced", None)
	}
	assert len(set(topics.values())) == 4
	assert topics["beginner"] == rules.STRICT_TEACHER_TOPICS["beginner"]
	assert topics[None] == rules.STRICT_TEACHER_TOPICS["default"]
	assert engine.propose_next_topic("expert") == rules.STRICT_TEACHER_TOPICS["default"]
	assert engine.propose_next_topic("default") == rules.STRICT_TEACHER_TOPICS["default"]
	assert engine.propose_next_topic(ProficiencyLevel.ADVANCED) == topics["advanced"]


class PickIndex:
	def __init__(self, index):
		self.index = index

	def choice(self, seq):
		return seq[self.index]


def test_encouragement_uses_injected_random_source():
	personality = get_personality(STRICT_TEACHER)
	engine = FeedbackEngine.for_personality(personality, rng=PickIndex(3))
	assert engine.compose_encouragement() == personality.encouragements[3]


def test_seeded_encouragement_is_reproducible():
	personality = get_personality(STRICT_TEACHER)
	a = FeedbackEngine.for_personality(personality, rng=random.Random(42))
	b = FeedbackEngine.for_personality(personality, rng=random.Random(42))
	drawn = [a.compose_encouragement() for _ in range(5)]
	assert drawn == [b.compose_encouragement() for _ in range(5)]
	assert set(drawn) <= set(personality.encouragements)


def test_structure_response_numbers_learning_points(engine):
	items = engine.analyze_utterance("He don't like stuff")
	text = engine.structure_response("Good effort.", items)
	assert text.startswith("Good effort.\n\n--- Learning Points ---\n1. I need to address")
	assert "\n2. Vocabulary precision points:" in text
	assert text.endswith("Apply these points in your next response.")
	assert engine.structure_response("Good effort.", []) == "Good effort."


def test_conversation_only_personality_has_no_rule_feedback():
	engine = FeedbackEngine.for_personality(get_personality(FRIENDLY_TUTOR))
	assert engine.analyze_utterance("He don't like stuff. " + "x" * 200) == []
	assert engine.propose_next_topic("beginner") == "Would you like to practice a different topic?"


@pytest.mark.parametrize("level", [["beginner"], {}, 3, ("advanced",), 2.5])
def test_next_topic_for_non_string_level_is_default(engine, level):
	assert engine.propose_next_topic(level) == rules.STRICT_TEACHER_TOPICS["default"]


@pytest.mark.parametrize("utterance", ["I study at a university", "We waited for an hour", "I go to school by bus"])
def test_article_check_flags_fixed_phrases(engine, utterance):
	assert [i.type for i in engine.check_grammar(utterance)] == ["article-usage"]
