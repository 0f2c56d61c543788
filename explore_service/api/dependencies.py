"""
FastAPI dependencies
"""
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from typing import Optional
import logging
import re

from ..config import settings
from ..domain.models import User
from ..infrastructure.database.connection import db_connection, DatabaseConnection
from ..infrastructure.database.repositories import RepositoryRepository, UserRepository
from ..application.listing import SearchRequest
from ..application.services import ExploreService, HomeService

logger = logging.getLogger(__name__)


# Security scheme
security = HTTPBearer(auto_error=False)

INT_PATTERN = re.compile(r"[+-]?[0-9]+")
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


async def get_db_connection_dep() -> DatabaseConnection:
    """Get database connection dependency"""
    return db_connection


async def get_user_repository(db: DatabaseConnection = Depends(get_db_connection_dep)) -> UserRepository:
    """Get account repository dependency"""
    return UserRepository(db)


async def get_repo_repository(
    db: DatabaseConnection = Depends(get_db_connection_dep),
    user_repo: UserRepository = Depends(get_user_repository)
) -> RepositoryRepository:
    """Get code repository repository dependency"""
    return RepositoryRepository(db, user_repo)


async def get_explore_service(
    repo_repo: RepositoryRepository = Depends(get_repo_repository),
    user_repo: UserRepository = Depends(get_user_repository)
) -> ExploreService:
    """Get explore service dependency"""
    return ExploreService(repo_repo, user_repo, settings)


async def get_home_service() -> HomeService:
    """Get home service dependency"""
    return HomeService(settings)


def parse_int(value: Optional[str]) -> int:
    """
    Parse an integer from a query parameter or claim, 0 when missing or malformed

    Only an optional sign followed by ASCII digits is accepted, and the value
    must fit a signed 64-bit integer.
    """
    if value is None or not INT_PATTERN.fullmatch(value):
        return 0
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        return 0
    return number


async def get_search_request(request: Request) -> SearchRequest:
    """
    Build the listing request from the raw ``page``, ``sort`` and ``q`` query parameters

    Parameters are read untyped so malformed values are normalized later
    instead of being rejected with a validation error.
    """
    params = request.query_params
    return SearchRequest(
        page=parse_int(params.get("page")),
        sort_token=params.get("sort", ""),
        keyword=params.get("q", ""),
    )


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    user_repo: UserRepository = Depends(get_user_repository)
) -> Optional[User]:
    """
    Get current user from JWT token (optional)

    Returns None if not authenticated instead of raising exception
    """
    if not credentials:
        return None

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError as e:
        logger.debug(f"Ignoring invalid token: {e}")
        return None

    user_id = parse_int(payload.get("sub"))
    if user_id <= 0:
        return None

    return await user_repo.find_by_id(user_id)


async def get_remembered_username(request: Request) -> Optional[str]:
    """Get the remembered login name from the auto-login cookie"""
    return request.cookies.get(settings.COOKIE_USER_NAME) or None
