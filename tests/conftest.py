import random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from languagepeer.db import Base, get_db
from languagepeer.feedback_engine import FeedbackEngine
from languagepeer.main import app
from languagepeer.personalities import STRICT_TEACHER, get_personality
from languagepeer.routers.conversations import get_llm_client


class StubLLM:
	"""Stands in for LLMClient; records calls and returns a canned reply."""

	def __init__(self, reply="Good effort. Can you try that again?", error=None):
		self.reply = reply
		self.error = error
		self.calls = []

	async def generate(self, system_prompt, user_message, *, history=()):
		self.calls.append((system_prompt, user_message, list(history)))
		if self.error is not None:
			raise self.error
		return self.reply

	async def aclose(self):
		pass


@pytest.fixture
def engine():
	return FeedbackEngine.for_personality(get_personality(STRICT_TEACHER), rng=random.Random(7))


@pytest.fixture
def db_session():
	test_engine = create_engine(
		"sqlite://",
		connect_args={"check_same_thread": False},
		poolclass=StaticPool,
		future=True,
	)
	Base.metadata.create_all(bind=test_engine)
	Session = sessionmaker(autocommit=False, autoflush=False, bind=test_engine, future=True)
	session = Session()
	try:
		yield session
	finally:
		session.close()
		test_engine.dispose()


@pytest.fixture
def stub_llm():
	return StubLLM()


@pytest.fixture
def client(db_session, stub_llm):
	def _get_db():
		yield db_session

	app.dependency_overrides[get_db] = _get_db
	app.dependency_overrides[get_llm_client] = lambda: stub_llm
	try:
		yield TestClient(app)
	finally:
		app.dependency_overrides.clear()
