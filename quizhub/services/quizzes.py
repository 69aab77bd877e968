"""Quiz service"""

import logging
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quizhub.core.exceptions import (
    DatabaseException,
    DuplicateException,
    NotFoundException,
    ValidationException,
)
from quizhub.engine.grading import answer_alternatives
from quizhub.engine.triggers import AchievementTriggerEvaluator, AwardOutcome
from quizhub.models import Question, QuestionType, Quiz
from quizhub.schemas.quiz import QuestionCreate, QuizCreate
from quizhub.services.achievements import AchievementService
from quizhub.services.attempts import AttemptStore
from quizhub.services.users import UserService

logger = logging.getLogger(__name__)

HISTORY_MODES = ("all", "practice", "nonpractice")


class QuizService:
    @staticmethod
    def get_quiz(db: Session, quiz_id: int) -> Quiz:
        """Get quiz by ID"""
        quiz = db.query(Quiz).filter(Quiz.id == quiz_id).first()
        if not quiz:
            raise NotFoundException("Quiz", details={"quiz_id": quiz_id})
        return quiz

    @staticmethod
    def get_quizzes(db: Session, skip: int = 0, limit: int = 20) -> List[Quiz]:
        """Get quizzes, newest first"""
        return (
            db.query(Quiz)
            .order_by(Quiz.created_at.desc(), Quiz.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    @staticmethod
    def list_questions(db: Session, quiz_id: int) -> List[Question]:
        """Questions of a quiz in authored order"""
        return (
            db.query(Question)
            .filter(Question.quiz_id == quiz_id)
            .order_by(Question.order_num)
            .all()
        )

    @staticmethod
    def get_history(db: Session, user_id: int, quiz_id: int, mode: str = "all") -> dict:
        """The user's attempts on one quiz, newest first, with their average score"""
        if mode not in HISTORY_MODES:
            raise ValidationException(
                f"Unknown history mode, expected one of {', '.join(HISTORY_MODES)}",
                submitted=mode,
            )
        QuizService.get_quiz(db, quiz_id)

        attempts = AttemptStore(db).list_attempts_by_user(user_id, quiz_id=quiz_id)
        if mode == "practice":
            attempts = [a for a in attempts if a.is_practice]
        elif mode == "nonpractice":
            attempts = [a for a in attempts if not a.is_practice]

        average = sum(a.score for a in attempts) / len(attempts) if attempts else None
        return {"quiz_id": quiz_id, "mode": mode, "attempts": attempts, "average_score": average}

    @staticmethod
    def count_by_creator(db: Session, creator_id: int) -> int:
        return db.query(func.count(Quiz.id)).filter(Quiz.creator_id == creator_id).scalar()

    @staticmethod
    def create_quiz(
        db: Session, quiz_data: QuizCreate, creator_id: int
    ) -> Tuple[Quiz, List[AwardOutcome]]:
        """
        Validate and store a quiz with its questions, then run the
        authoring achievement rules for the creator.

        Raises:
            ValidationException: invalid settings or questions; the input is echoed back
            DuplicateException: the title is taken
            NotFoundException: the creator does not exist
        """
        QuizService.validate_quiz(quiz_data)

        if UserService.get_user(db, creator_id) is None:
            raise NotFoundException("User", details={"user_id": creator_id})
        if db.query(Quiz.id).filter(Quiz.title == quiz_data.title).first():
            raise DuplicateException("Quiz title", details={"title": quiz_data.title})

        quiz = Quiz(
            **quiz_data.model_dump(exclude={"questions"}),
            creator_id=creator_id,
        )
        for order_num, question_data in enumerate(quiz_data.questions, start=1):
            quiz.questions.append(
                Question(
                    question_type=question_data.question_type,
                    question_text=question_data.question_text,
                    correct_answer=question_data.correct_answer,
                    choices=list(question_data.choices)
                    if question_data.question_type == QuestionType.MULTIPLE_CHOICE else [],
                    image_url=question_data.image_url
                    if question_data.question_type == QuestionType.PICTURE_RESPONSE else None,
                    order_num=order_num,
                )
            )

        try:
            db.add(quiz)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise DatabaseException("Failed to create quiz") from e
        db.refresh(quiz)
        logger.info(
            "Quiz created",
            extra={"quiz_id": quiz.id, "creator_id": creator_id, "questions": len(quiz_data.questions)},
        )

        evaluator = AchievementTriggerEvaluator(AttemptStore(db), AchievementService(db))
        outcomes = evaluator.evaluate_authoring(creator_id, QuizService.count_by_creator(db, creator_id))
        return quiz, outcomes

    @staticmethod
    def validate_quiz(quiz_data: QuizCreate) -> None:
        if not quiz_data.questions:
            raise ValidationException(
                "A quiz needs at least one question", submitted=quiz_data.model_dump(mode="json")
            )
        if quiz_data.one_page and quiz_data.immediate_correction:
            raise ValidationException(
                "Immediate correction needs one question per page",
                submitted=quiz_data.model_dump(mode="json"),
            )
        for position, question in enumerate(quiz_data.questions, start=1):
            QuizService.validate_question(question, position)

    @staticmethod
    def validate_question(question: QuestionCreate, position: int) -> None:
        submitted = question.model_dump(mode="json")
        if question.question_type == QuestionType.MULTIPLE_CHOICE:
            choices = {choice.strip().lower() for choice in question.choices}
            alternatives = answer_alternatives(question.correct_answer)
            if not alternatives or not set(alternatives) <= choices:
                raise ValidationException(
                    "Every correct answer must match one of the choices",
                    details={"question": position},
                    submitted=submitted,
                )
        elif question.question_type == QuestionType.PICTURE_RESPONSE:
            if not question.image_url:
                raise ValidationException(
                    "Picture response questions need an image URL",
                    details={"question": position},
                    submitted=submitted,
                )
