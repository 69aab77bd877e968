from quizhub.api.deps import get_session_store
from quizhub.core.config import settings
from quizhub.models import QuestionType

API = settings.API_V1_STR


def headers(session_id=None, user_id=None):
    values = {}
    if session_id:
        values["X-Session-ID"] = session_id
    if user_id is not None:
        values["X-User-ID"] = str(user_id)
    return values


def test_root_and_health(client):
    assert client.get("/").status_code == 200

    response = client.get(f"{API}/health")
    assert response.json()["status"] == "healthy"
    assert "X-Request-ID" in response.headers

    detailed = client.get(f"{API}/health/detailed").json()
    assert detailed["checks"]["database"]["status"] == "healthy"
    assert detailed["checks"]["sessions"]["backend"] == "memory"


def test_request_id_is_echoed(client):
    response = client.get(f"{API}/health", headers={"X-Request-ID": "trace-1"})

    assert response.headers["X-Request-ID"] == "trace-1"


def test_create_and_fetch_quiz(client, make_user):
    user = make_user()
    payload = {
        "title": "Colours",
        "questions": [
            {
                "question_type": QuestionType.MULTIPLE_CHOICE.value,
                "question_text": "Sky?",
                "correct_answer": "Blue",
                "choices": ["Red", "Blue"],
            }
        ],
    }

    created = client.post(f"{API}/quizzes/", json=payload, headers=headers(user_id=user.id))
    assert created.status_code == 201
    body = created.json()
    assert body["new_achievements"] == ["amateur_author"]

    quiz = client.get(f"{API}/quizzes/{body['quiz']['id']}").json()
    assert quiz["questions"][0]["choices"] == ["Red", "Blue"]
    assert "correct_answer" not in quiz["questions"][0]

    listed = client.get(f"{API}/quizzes/").json()
    assert [q["title"] for q in listed] == ["Colours"]


def test_create_quiz_needs_a_user(client):
    response = client.post(f"{API}/quizzes/", json={"title": "x", "questions": []})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"


def test_invalid_multiple_choice_echoes_input(client, make_user):
    payload = {
        "title": "Colours",
        "questions": [
            {
                "question_type": "multiple-choice",
                "question_text": "Sky?",
                "correct_answer": "Green",
                "choices": ["Red", "Blue"],
            }
        ],
    }

    response = client.post(f"{API}/quizzes/", json=payload, headers=headers(user_id=make_user().id))

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"]["input"]["correct_answer"] == "Green"


def test_unknown_quiz_is_404(client):
    response = client.get(f"{API}/quizzes/999")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_take_quiz_through_the_api(client, make_user, make_quiz):
    user = make_user()
    quiz = make_quiz(immediate_correction=True)
    caller = headers("session-1", user.id)

    started = client.post(f"{API}/take/{quiz.id}", headers=caller)
    assert started.status_code == 200
    assert started.json()["phase"] == "question"
    assert started.json()["session_id"] == "session-1"

    feedback = client.post(f"{API}/take/submit", json={"answer": "Lyon"}, headers=caller).json()
    assert feedback["feedback"]["correct"] is False
    assert feedback["feedback"]["correct_answer"] == "Paris,paris"

    again = client.get(f"{API}/take/current", headers=caller).json()
    assert again["question_number"] == 1

    client.post(f"{API}/take/advance", headers=caller)
    client.post(f"{API}/take/actions", json={"action": "submit", "answer": "four"}, headers=caller)
    result = client.post(f"{API}/take/actions", json={"action": "next"}, headers=caller).json()

    assert result["phase"] == "result"
    assert result["score"] == 50.0
    assert result["attempt_id"] is not None

    history = client.get(f"{API}/quizzes/{quiz.id}/history", headers=caller).json()
    assert [a["score"] for a in history["attempts"]] == [50.0]

    summary = client.get(f"{API}/quizzes/{quiz.id}/summary").json()
    assert summary["all_time_top"][0]["user_id"] == user.id

    leaderboard = client.get(f"{API}/leaderboard/").json()
    assert leaderboard[0]["quiz_id"] == quiz.id

    achievements = client.get(f"{API}/achievements/user/{user.id}").json()
    assert [a["achievement_type"] for a in achievements] == ["i_am_the_greatest"]


def test_start_without_session_header_mints_one(client, make_quiz):
    quiz = make_quiz(one_page=True)

    started = client.post(f"{API}/take/{quiz.id}").json()
    session_id = started["session_id"]
    result = client.post(
        f"{API}/take/submit-all",
        json={"answers": ["paris", "4"]},
        headers=headers(session_id),
    ).json()

    assert started["phase"] == "all_questions"
    assert session_id
    assert result["score"] == 100.0
    assert result["attempt_id"] is None


def test_answer_without_quiz_in_progress_asks_to_restart(client):
    response = client.post(f"{API}/take/submit", json={"answer": "a"}, headers=headers("nobody"))

    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "INVALID_STATE"
    assert error["details"]["restart"] is True


def test_practice_not_offered_is_rejected(client, make_quiz):
    quiz = make_quiz()

    response = client.post(f"{API}/take/{quiz.id}?practice=true", headers=headers("s"))

    assert response.status_code == 422


def test_achievement_catalogue(client):
    types = client.get(f"{API}/achievements/types").json()

    assert len(types) == 6
    assert {"type": "quiz_machine", "display_name": "Quiz Machine", "description": "Took 10 quizzes!"} in types


def test_achievements_of_unknown_user_is_404(client):
    assert client.get(f"{API}/achievements/user/404").status_code == 404


def test_session_store_outage_is_a_server_error(client, redis_store, fake_redis, make_quiz):
    quiz = make_quiz()
    app_overrides = client.app.dependency_overrides
    app_overrides[get_session_store] = lambda: redis_store
    fake_redis.failures["set"] = 1

    response = client.post(f"{API}/take/{quiz.id}", headers=headers("s"))

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "SESSION_STORE_ERROR"
