from fastapi import APIRouter

from judgepool.api.api_v1.endpoints import groups, judges, scores, submissions

api_router = APIRouter()
api_router.include_router(groups.router, prefix="/groups", tags=["groups"])
api_router.include_router(judges.router, prefix="/judges", tags=["judges"])
api_router.include_router(submissions.router, prefix="/submissions", tags=["submissions"])
api_router.include_router(scores.router, prefix="/scores", tags=["scores"])
