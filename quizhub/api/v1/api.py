"""
API v1 main router
Combines all v1 endpoint routers
"""

from fastapi import APIRouter

from quizhub.api.v1.endpoints import achievements, health, leaderboard, quiz_taking, quizzes

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(quizzes.router, prefix="/quizzes", tags=["Quizzes"])
api_router.include_router(quiz_taking.router, prefix="/take", tags=["Quiz Taking"])
api_router.include_router(leaderboard.router, prefix="/leaderboard", tags=["Leaderboard"])
api_router.include_router(achievements.router, prefix="/achievements", tags=["Achievements"])
