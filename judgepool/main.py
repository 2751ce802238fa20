import logging

from beanie import init_beanie
from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorClient
from starlette import status
from starlette.requests import Request
from starlette.responses import JSONResponse

from judgepool import crud, models
from judgepool.api.api_v1.api import api_router
from judgepool.api.documentation_text import api_description, tags_metadata
from judgepool.config import settings

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.project_name,
    openapi_url=f"{settings.api_v1_str}/openapi.json",
    openapi_tags=tags_metadata,
    description=api_description,
)

ERROR_STATUS_CODES: list[tuple[type[crud.CRUDError], int]] = [
    (crud.SessionExpiredError, status.HTTP_401_UNAUTHORIZED),
    (crud.NotFoundError, status.HTTP_404_NOT_FOUND),
    (crud.StaleNoteError, status.HTTP_404_NOT_FOUND),
    (crud.NotOwnerError, status.HTTP_403_FORBIDDEN),
    (crud.InvalidGroupPasswordError, status.HTTP_403_FORBIDDEN),
    (crud.JudgingClosedError, status.HTTP_403_FORBIDDEN),
    (crud.StatusConflictError, status.HTTP_409_CONFLICT),
    (crud.CriterionInUseError, status.HTTP_409_CONFLICT),
    (crud.DuplicateGroupError, status.HTTP_409_CONFLICT),
    (crud.IncompleteScoringError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (crud.InvalidInputError, status.HTTP_422_UNPROCESSABLE_ENTITY),
]


def status_code_for(exc: crud.CRUDError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


@app.on_event("startup")
async def app_init():
    mongo_client = AsyncIOMotorClient(settings.get_mongodb_url())
    await init_beanie(mongo_client[settings.database_name], document_models=models.DB_MODELS)
    logger.info("Connected to database '%s'", settings.database_name)


@app.exception_handler(crud.CRUDError)
async def crud_error_handler(request: Request, exc: crud.CRUDError):
    status_code = status_code_for(exc)
    if status_code == status.HTTP_401_UNAUTHORIZED:
        logger.info("Rejected expired session on %s", request.url.path)
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "error": type(exc).__name__})


app.include_router(api_router, prefix=settings.api_v1_str)
