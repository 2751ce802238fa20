from typing import Annotated

import limits
from beanie import PydanticObjectId
from fastapi import Depends, HTTPException, Security
from fastapi.security import APIKeyHeader
from limits.aio.strategies import RateLimiter
from starlette import status
from starlette.requests import Request

from judgepool import crud, models, security
from judgepool.limits import rate_limiter

admin_key_header = APIKeyHeader(
    name="X-API-Key",
    description="Administrator API key, configured with the `ADMIN_API_KEY` setting.",
    scheme_name="X-API-Key",
)
judge_session_header = APIKeyHeader(
    name="X-Judge-Session",
    description="Judge session token, returned by `/judges/groups/{group_id}/register`.",
    scheme_name="X-Judge-Session",
)


async def get_admin(key: Annotated[str, Security(admin_key_header)]) -> None:
    if not security.verify_admin_key(key):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid administrator API key")


async def get_current_judge(token: Annotated[str, Security(judge_session_header)]) -> models.Judge:
    # SessionExpiredError is turned into a 401 by the application's CRUDError handler
    return await crud.judge.validate_session(token=token)


async def get_current_token(token: Annotated[str, Security(judge_session_header)]) -> str:
    return token


async def get_group(group_id: PydanticObjectId) -> models.JudgingGroup:
    return await crud.group.get_or_raise(group_id)


def get_rate_limiter() -> RateLimiter:
    return rate_limiter


def rate_limit_client(limit: str):
    parsed_limit = limits.parse(limit)

    async def f(request: Request, limiter: Annotated[RateLimiter, Depends(get_rate_limiter)]) -> None:
        client = request.client.host if request.client is not None else "unknown"
        should_limit = not await limiter.hit(parsed_limit, request.url.path, client)
        if should_limit:
            raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail="Too many requests")

    return f


CurrentJudgeDep = Annotated[models.Judge, Depends(get_current_judge)]
SessionTokenDep = Annotated[str, Depends(get_current_token)]
GroupDep = Annotated[models.JudgingGroup, Depends(get_group)]
