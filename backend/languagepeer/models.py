from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from .db import Base


class ConversationSession(Base):
	__tablename__ = "conversation_sessions"
	session_id = Column(String(64), primary_key=True, index=True)
	user_id = Column(String(128), nullable=False, default="")
	personality_id = Column(String(64), nullable=False)
	proficiency_level = Column(String(32), nullable=True)
	current_topic = Column(Text, nullable=True)
	status = Column(String(16), default="active", nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

	messages = relationship(
		"ConversationMessageRow",
		back_populates="session",
		order_by="ConversationMessageRow.seq",
		cascade="all, delete-orphan",
	)
	feedback = relationship(
		"FeedbackRecord",
		back_populates="session",
		order_by="FeedbackRecord.seq",
		cascade="all, delete-orphan",
	)


class ConversationMessageRow(Base):
	__tablename__ = "conversation_messages"
	seq = Column(Integer, primary_key=True, autoincrement=True)
	message_id = Column(String(64), unique=True, nullable=False, index=True)
	session_id = Column(String(64), ForeignKey("conversation_sessions.session_id"), nullable=False, index=True)
	sender = Column(String(16), nullable=False)
	content = Column(Text, nullable=False)
	transcription_confidence = Column(Float, nullable=True)
	timestamp = Column(DateTime, default=datetime.utcnow, nullable=False)

	session = relationship("ConversationSession", back_populates="messages")


class FeedbackRecord(Base):
	__tablename__ = "feedback_items"
	# seq preserves the order the engine produced the items in
	seq = Column(Integer, primary_key=True, autoincrement=True)
	feedback_id = Column(String(64), unique=True, nullable=False, index=True)
	session_id = Column(String(64), ForeignKey("conversation_sessions.session_id"), nullable=False, index=True)
	message_id = Column(String(64), nullable=False, default="")
	type = Column(String(32), nullable=False)
	content = Column(Text, nullable=False)
	delivered_at = Column(DateTime, nullable=False)

	session = relationship("ConversationSession", back_populates="feedback")
