from __future__ import annotations
import re
from typing import List
from xml.sax.saxutils import escape

from .personalities import VoiceCharacteristics


_QUOTED = re.compile(r'"([^"]+)"')
_CAPS_WORD = re.compile(r"\b[A-Z]{2,}\b")


def generate_ssml(content: str, voice: VoiceCharacteristics) -> str:
	"""Wrap a reply in SSML for Polly: a short pause after questions, quoted text emphasised."""
	# Escape before adding tags; emphasis before breaks since the break tag contains quotes
	processed = _QUOTED.sub(r'<emphasis level="strong">\1</emphasis>', escape(content))
	processed = processed.replace("?", '?<break time="0.5s"/>')
	return (
		f'<speak><prosody rate="{voice.speaking_rate}" pitch="{voice.pitch}">'
		f"{processed}</prosody></speak>"
	)


def extract_emphasis_words(content: str) -> List[str]:
	emphasis = _QUOTED.findall(content)
	emphasis.extend(_CAPS_WORD.findall(content))
	return emphasis
