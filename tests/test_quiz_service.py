from datetime import timedelta

import pytest

from quizhub.core.exceptions import DuplicateException, NotFoundException, ValidationException
from quizhub.models import AchievementType, QuestionType
from quizhub.schemas.quiz import QuestionCreate, QuizCreate
from quizhub.services.achievements import AchievementService
from quizhub.services.leaderboard import LeaderboardService
from quizhub.services.quizzes import QuizService
from tests.conftest import NOW


def quiz_create(title="Capitals", **settings):
    questions = settings.pop(
        "questions",
        [QuestionCreate(question_text="Capital of France?", correct_answer="Paris")],
    )
    return QuizCreate(title=title, questions=questions, **settings)


def test_create_quiz_numbers_questions_and_grants_first_author_badge(db, make_user):
    user = make_user()
    data = quiz_create(
        questions=[
            QuestionCreate(question_text="Q1", correct_answer="a"),
            QuestionCreate(
                question_type=QuestionType.MULTIPLE_CHOICE,
                question_text="Q2",
                correct_answer="Blue",
                choices=["Red", "Blue"],
            ),
        ]
    )

    quiz, outcomes = QuizService.create_quiz(db, data, user.id)

    assert [q.order_num for q in quiz.questions] == [1, 2]
    assert quiz.questions[1].choices == ["Red", "Blue"]
    assert [(o.achievement_type, o.granted) for o in outcomes] == [(AchievementType.AMATEUR_AUTHOR, True)]


def test_fifth_quiz_grants_prolific_author(db, make_user):
    user = make_user()
    for n in range(4):
        QuizService.create_quiz(db, quiz_create(title=f"Quiz {n}"), user.id)

    _, outcomes = QuizService.create_quiz(db, quiz_create(title="Quiz 5"), user.id)

    granted = [o.achievement_type for o in outcomes if o.granted]
    assert granted == [AchievementType.PROLIFIC_AUTHOR]


def test_multiple_choice_answer_must_be_a_choice(db, make_user):
    user = make_user()
    question = QuestionCreate(
        question_type=QuestionType.MULTIPLE_CHOICE,
        question_text="Colour?",
        correct_answer="Green",
        choices=["Red", "Blue"],
    )

    with pytest.raises(ValidationException) as exc_info:
        QuizService.create_quiz(db, quiz_create(questions=[question]), user.id)

    assert exc_info.value.status_code == 422
    assert exc_info.value.details["input"]["correct_answer"] == "Green"
    assert exc_info.value.details["question"] == 1


def test_multiple_choice_accepts_alternatives_that_are_all_choices(db, make_user):
    question = QuestionCreate(
        question_type=QuestionType.MULTIPLE_CHOICE,
        question_text="Capital of France?",
        correct_answer="Paris,paris",
        choices=["Paris", "Lyon"],
    )

    quiz, _ = QuizService.create_quiz(db, quiz_create(questions=[question]), make_user().id)

    assert quiz.questions[0].correct_answer == "Paris,paris"


@pytest.mark.parametrize("correct_answer", ["Paris,Rome", ","])
def test_multiple_choice_rejects_alternative_outside_choices(db, make_user, correct_answer):
    question = QuestionCreate(
        question_type=QuestionType.MULTIPLE_CHOICE,
        question_text="Capital of France?",
        correct_answer=correct_answer,
        choices=["Paris", "Lyon"],
    )

    with pytest.raises(ValidationException):
        QuizService.create_quiz(db, quiz_create(questions=[question]), make_user().id)


def test_multiple_choice_match_ignores_case_and_whitespace(db, make_user):
    question = QuestionCreate(
        question_type=QuestionType.MULTIPLE_CHOICE,
        question_text="Colour?",
        correct_answer=" blue",
        choices=["Red", "Blue "],
    )

    QuizService.create_quiz(db, quiz_create(questions=[question]), make_user().id)


@pytest.mark.parametrize(
    "settings",
    [
        {"questions": []},
        {"one_page": True, "immediate_correction": True},
        {"questions": [QuestionCreate(question_type=QuestionType.PICTURE_RESPONSE, question_text="?", correct_answer="cat")]},
    ],
)
def test_invalid_quiz_settings_are_rejected(db, make_user, settings):
    with pytest.raises(ValidationException):
        QuizService.create_quiz(db, quiz_create(**settings), make_user().id)


def test_duplicate_title_is_rejected(db, make_user):
    user = make_user()
    QuizService.create_quiz(db, quiz_create(), user.id)

    with pytest.raises(DuplicateException):
        QuizService.create_quiz(db, quiz_create(), user.id)


def test_unknown_creator_is_not_found(db):
    with pytest.raises(NotFoundException):
        QuizService.create_quiz(db, quiz_create(), 404)


def test_history_filters_by_mode(db, make_user, make_quiz, make_attempt):
    user = make_user()
    quiz = make_quiz(practice_mode=True)
    make_attempt(user, quiz, 40.0, date_taken=NOW - timedelta(hours=2))
    make_attempt(user, quiz, 100.0, is_practice=True, date_taken=NOW - timedelta(hours=1))
    make_attempt(user, quiz, 80.0, date_taken=NOW)

    everything = QuizService.get_history(db, user.id, quiz.id)
    graded = QuizService.get_history(db, user.id, quiz.id, "nonpractice")
    practice = QuizService.get_history(db, user.id, quiz.id, "practice")

    assert [a.score for a in everything["attempts"]] == [80.0, 100.0, 40.0]
    assert [a.score for a in graded["attempts"]] == [80.0, 40.0]
    assert graded["average_score"] == 60.0
    assert [a.score for a in practice["attempts"]] == [100.0]

    with pytest.raises(ValidationException):
        QuizService.get_history(db, user.id, quiz.id, "weekly")


def test_history_without_attempts_has_no_average(db, make_user, make_quiz):
    history = QuizService.get_history(db, make_user().id, make_quiz().id)

    assert history["attempts"] == []
    assert history["average_score"] is None


def test_award_is_granted_once(db, make_user):
    user = make_user()
    achievements = AchievementService(db)

    assert achievements.award(user.id, AchievementType.QUIZ_MACHINE) is True
    assert achievements.award(user.id, AchievementType.QUIZ_MACHINE) is False

    earned = achievements.list_for_user(user.id)
    assert [a.achievement_type for a in earned] == [AchievementType.QUIZ_MACHINE]
    assert earned[0].description == "Took 10 quizzes!"


def test_quiz_summary_ranks_best_attempt_per_user(db, make_user, make_quiz, make_attempt):
    alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
    quiz = make_quiz()
    make_attempt(alice, quiz, 50.0, date_taken=NOW - timedelta(days=3))
    make_attempt(alice, quiz, 100.0, date_taken=NOW - timedelta(days=2))
    make_attempt(bob, quiz, 100.0, time_taken=10, date_taken=NOW - timedelta(hours=1))
    make_attempt(carol, quiz, 0.0, is_practice=True, date_taken=NOW)

    summary = LeaderboardService.get_quiz_summary(db, quiz.id, now=NOW)

    assert [r.username for r in summary.all_time_top] == ["bob", "alice"]
    assert [r.username for r in summary.last_day_top] == ["bob"]
    assert [r.username for r in summary.recent_test_takers] == ["bob", "alice"]
    assert summary.total_attempts == 3
    assert summary.average_score == pytest.approx(250 / 3)


def test_global_leaderboard_names_quizzes_and_users(db, make_user, make_quiz, make_attempt):
    alice, bob = make_user("alice"), make_user("bob")
    geography = make_quiz(title="Geography")
    history = make_quiz(title="History")
    make_attempt(alice, geography, 50.0)
    make_attempt(bob, history, 75.0)
    make_attempt(bob, history, 25.0)

    entries = LeaderboardService.get_leaderboard(db)

    assert [(e.rank, e.username, e.quiz_title, e.best_score) for e in entries] == [
        (1, "bob", "History", 75.0),
        (2, "alice", "Geography", 50.0),
    ]
