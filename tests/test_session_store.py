import time

import pytest

from quizhub.core.exceptions import SessionStoreException
from quizhub.db.session_store import DeliverySessionStore
from quizhub.schemas.delivery import DeliveryState, QuestionSnapshot, QuizSnapshot
from tests.conftest import NOW


def make_state():
    return DeliveryState(
        quiz=QuizSnapshot(id=1, title="Capitals"),
        questions=[
            QuestionSnapshot(
                id=1, quiz_id=1, question_type="question-response",
                question_text="Capital of France?", correct_answer="Paris", order_num=1,
            )
        ],
        answers=[],
        started_at=NOW,
    )


async def test_store_keeps_state_in_process_without_redis():
    store = DeliverySessionStore(ttl=60)
    state = make_state()

    await store.save("abc", state)

    assert store.backend == "memory"
    assert await store.load("abc") == state
    assert await store.discard("abc") is True
    assert await store.discard("abc") is False
    assert await store.load("abc") is None


async def test_expired_state_is_dropped():
    store = DeliverySessionStore(ttl=-1)

    await store.save("abc", make_state())

    assert await store.load("abc") is None


async def test_unreadable_state_is_discarded():
    store = DeliverySessionStore(ttl=60)
    store._local[store._key("abc")] = (float("inf"), "{not json")

    assert await store.load("abc") is None
    assert store._key("abc") not in store._local


async def test_saving_drops_other_expired_sessions():
    store = DeliverySessionStore(ttl=60)
    store._local[store._key("stale")] = (time.monotonic() - 1, make_state().model_dump_json())

    await store.save("fresh", make_state())

    assert store._key("stale") not in store._local
    assert await store.load("fresh") == make_state()


async def test_redis_round_trip(redis_store, fake_redis):
    await redis_store.save("abc", make_state())

    assert redis_store.backend == "redis"
    assert "quizhub:delivery:abc" in fake_redis.data
    assert await redis_store.load("abc") == make_state()
    assert await redis_store.discard("abc") is True


async def test_redis_write_failure_raises(redis_store, fake_redis):
    fake_redis.failures["set"] = 1

    with pytest.raises(SessionStoreException) as exc_info:
        await redis_store.save("abc", make_state())

    assert exc_info.value.status_code == 503
    assert fake_redis.data == {}


async def test_redis_delete_failure_raises(redis_store, fake_redis):
    await redis_store.save("abc", make_state())
    fake_redis.failures["delete"] = 1

    with pytest.raises(SessionStoreException):
        await redis_store.discard("abc")

    assert await redis_store.load("abc") == make_state()


async def test_redis_read_failure_raises(redis_store, fake_redis):
    fake_redis.failures["get"] = 1

    with pytest.raises(SessionStoreException):
        await redis_store.load("abc")
