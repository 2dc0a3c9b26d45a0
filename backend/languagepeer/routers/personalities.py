from __future__ import annotations
from typing import List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..personalities import AgentPersonality, SupportiveApproach, VoiceCharacteristics, get_personality, list_personalities


router = APIRouter(prefix="/personalities", tags=["personalities"])


class PersonalityOut(BaseModel):
	id: str
	name: str
	traits: List[str]
	conversation_style: str
	supportive_approach: SupportiveApproach
	voice_characteristics: VoiceCharacteristics
	specialties: List[str]
	rule_based_feedback: bool


def to_out(p: AgentPersonality) -> PersonalityOut:
	return PersonalityOut(
		id=p.id,
		name=p.name,
		traits=list(p.traits),
		conversation_style=p.conversation_style,
		supportive_approach=p.supportive_approach,
		voice_characteristics=p.voice_characteristics,
		specialties=list(p.specialties),
		rule_based_feedback=bool(p.feedback_rules.vocabulary or p.feedback_rules.subject_verb),
	)


@router.get("", response_model=List[PersonalityOut])
def personalities():
	return [to_out(p) for p in list_personalities()]


@router.get("/{personality_id}", response_model=PersonalityOut)
def personality(personality_id: str):
	try:
		return to_out(get_personality(personality_id))
	except KeyError:
		raise HTTPException(status_code=404, detail="personality not found")
