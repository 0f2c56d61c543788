"""
Explore routes
"""
from fastapi import APIRouter, Depends
from typing import Optional

from ...schemas import (
    ExploreReposResponse,
    ExploreUsersResponse,
    AccountSummary,
    RepositorySummary,
    Pagination,
)
from ...domain.models import User
from ...application.listing import SearchRequest
from ...application.services import ExploreService, ExploreView
from ..dependencies import get_explore_service, get_search_request, get_current_user_optional


router = APIRouter(prefix="/explore", tags=["Explore"])


def _users_response(view: ExploreView) -> ExploreUsersResponse:
    result = view.result
    return ExploreUsersResponse(
        template=view.template,
        title=view.title,
        keyword=result.keyword,
        total=result.total_count,
        sort_type=result.sort_type,
        page=Pagination.from_window(result.pagination),
        users=[AccountSummary.from_user(user, result.show_email) for user in result.items],
        show_user_email=result.show_email,
        **view.flags
    )


@router.get("/repos", response_model=ExploreReposResponse)
async def explore_repos(
    search: SearchRequest = Depends(get_search_request),
    current_user: Optional[User] = Depends(get_current_user_optional),
    explore_service: ExploreService = Depends(get_explore_service)
):
    """
    Explore repositories

    - **page**: Page number (malformed or non-positive values mean page 1)
    - **sort**: oldest, recentupdate, leastupdate, reversealphabetically, alphabetically
    - **q**: Keyword matched against repository names
    """
    view = await explore_service.explore_repositories(search, current_user)
    result = view.result

    return ExploreReposResponse(
        template=view.template,
        title=view.title,
        keyword=result.keyword,
        total=result.total_count,
        sort_type=result.sort_type,
        page=Pagination.from_window(result.pagination),
        repos=[RepositorySummary.from_repository(repo) for repo in result.items],
        **view.flags
    )


@router.get("/users", response_model=ExploreUsersResponse)
async def explore_users(
    search: SearchRequest = Depends(get_search_request),
    explore_service: ExploreService = Depends(get_explore_service)
):
    """
    Explore individual users

    - **page**: Page number
    - **sort**: oldest, recentupdate, leastupdate, reversealphabetically, alphabetically
    - **q**: Keyword matched against login and full name
    """
    view = await explore_service.explore_users(search)
    return _users_response(view)


@router.get("/organizations", response_model=ExploreUsersResponse)
async def explore_organizations(
    search: SearchRequest = Depends(get_search_request),
    explore_service: ExploreService = Depends(get_explore_service)
):
    """
    Explore organizations

    Same parameters as the users page.
    """
    view = await explore_service.explore_organizations(search)
    return _users_response(view)
