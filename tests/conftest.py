from datetime import datetime, timedelta
from itertools import count

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from quizhub import models
from quizhub.api.deps import get_session_store
from quizhub.core.database import Base, build_engine, get_db
from quizhub.db.session_store import DeliverySessionStore
from quizhub.main import app
from quizhub.models import Question, QuestionType, Quiz, QuizAttempt, User

NOW = datetime(2024, 5, 1, 12, 0, 0)


@pytest.fixture
def db():
    engine = build_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_store():
    return DeliverySessionStore(ttl=60)


@pytest.fixture
def client(db, session_store):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: session_store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    sequence = count(1)

    def factory(username=None):
        user = models.User(username=username or f"user{next(sequence)}")
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return factory


@pytest.fixture
def make_quiz(db, make_user):
    """Quiz whose questions are given as (text, correct_answer) pairs or dicts"""
    sequence = count(1)

    def factory(questions=None, creator=None, **settings):
        creator = creator or make_user()
        quiz = Quiz(title=settings.pop("title", f"Quiz {next(sequence)}"), creator_id=creator.id, **settings)
        if questions is None:
            questions = [("Capital of France?", "Paris,paris"), ("2 + 2?", "4,four")]
        for order_num, fields in enumerate(questions, start=1):
            if isinstance(fields, tuple):
                fields = {"question_text": fields[0], "correct_answer": fields[1]}
            fields.setdefault("question_type", QuestionType.QUESTION_RESPONSE)
            quiz.questions.append(Question(order_num=order_num, **fields))
        db.add(quiz)
        db.commit()
        db.refresh(quiz)
        return quiz

    return factory


@pytest.fixture
def make_attempt(db):
    def factory(user, quiz, score, total_questions=2, time_taken=30, date_taken=NOW, is_practice=False):
        attempt = QuizAttempt(
            user_id=user.id,
            quiz_id=quiz.id,
            score=score,
            total_questions=total_questions,
            time_taken=time_taken,
            date_taken=date_taken,
            is_practice=is_practice,
        )
        db.add(attempt)
        db.commit()
        db.refresh(attempt)
        return attempt

    return factory


class FixedClock:
    """Clock returning a settable time"""

    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def tick(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FixedClock()


class FakeRedis:
    """Dict-backed stand-in for ``redis.asyncio.Redis``; ``failures`` maps a command to how many calls fail"""

    def __init__(self):
        self.data = {}
        self.failures = {}

    def _maybe_fail(self, command):
        remaining = self.failures.get(command, 0)
        if remaining:
            self.failures[command] = remaining - 1
            raise RedisConnectionError(f"{command} failed")

    async def get(self, key):
        self._maybe_fail("get")
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self._maybe_fail("set")
        self.data[key] = value
        return True

    async def delete(self, key):
        self._maybe_fail("delete")
        return 1 if self.data.pop(key, None) is not None else 0


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def redis_store(fake_redis):
    store = DeliverySessionStore(ttl=60)
    store.redis_client = fake_redis
    store.is_connected = True
    return store
