"""
Pydantic schemas for Explore Service responses
"""
from pydantic import BaseModel
from typing import Optional, List

from .application.listing import PaginationWindow
from .domain.models import User, Repository


class PageLink(BaseModel):
    """One numbered pagination link"""
    num: int
    is_current: bool


class Pagination(BaseModel):
    """Pagination window"""
    current_page: int
    page_size: int
    total: int
    total_pages: int
    visible_neighbor_span: int
    is_first: bool
    is_last: bool
    has_previous: bool
    has_next: bool
    previous: int
    next: int
    pages: List[PageLink]

    @classmethod
    def from_window(cls, window: PaginationWindow) -> "Pagination":
        return cls(
            current_page=window.current_page,
            page_size=window.page_size,
            total=window.total_count,
            total_pages=window.total_pages,
            visible_neighbor_span=window.visible_neighbor_span,
            is_first=window.is_first,
            is_last=window.is_last,
            has_previous=window.has_previous,
            has_next=window.has_next,
            previous=window.previous,
            next=window.next,
            pages=[PageLink(num=link.num, is_current=link.is_current) for link in window.pages()],
        )


class AccountSummary(BaseModel):
    """Individual user or organization as shown in listings"""
    id: int
    name: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    type: str = "individual"
    avatar_url: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    num_repos: int = 0
    created_unix: Optional[int] = None
    updated_unix: Optional[int] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_user(cls, user: User, show_email: bool = False) -> "AccountSummary":
        return cls(
            id=user.id,
            name=user.name,
            full_name=user.full_name,
            email=user.email if show_email else None,
            type="organization" if user.is_organization() else "individual",
            avatar_url=user.avatar_url,
            location=user.location,
            website=user.website,
            description=user.description,
            num_repos=user.num_repos,
            created_unix=user.created_unix,
            updated_unix=user.updated_unix,
        )


class RepositorySummary(BaseModel):
    """Repository as shown in listings"""
    id: int
    name: str
    full_name: str
    description: Optional[str] = None
    website: Optional[str] = None
    is_private: bool = False
    is_fork: bool = False
    is_mirror: bool = False
    num_stars: int = 0
    num_forks: int = 0
    num_watches: int = 0
    created_unix: Optional[int] = None
    updated_unix: Optional[int] = None
    owner: AccountSummary

    @classmethod
    def from_repository(cls, repo: Repository) -> "RepositorySummary":
        return cls(
            id=repo.id,
            name=repo.name,
            full_name=repo.full_name(),
            description=repo.description,
            website=repo.website,
            is_private=repo.is_private,
            is_fork=repo.is_fork,
            is_mirror=repo.is_mirror,
            num_stars=repo.num_stars,
            num_forks=repo.num_forks,
            num_watches=repo.num_watches,
            created_unix=repo.created_unix,
            updated_unix=repo.updated_unix,
            owner=AccountSummary.from_user(repo.owner),
        )


class ExploreReposResponse(BaseModel):
    """Explore repositories page"""
    template: str
    title: str
    keyword: str
    total: int
    sort_type: str
    page: Pagination
    repos: List[RepositorySummary]
    page_is_explore: bool = True
    page_is_explore_repositories: bool = True


class ExploreUsersResponse(BaseModel):
    """Explore users or organizations page"""
    template: str
    title: str
    keyword: str
    total: int
    sort_type: str
    page: Pagination
    users: List[AccountSummary]
    show_user_email: bool = False
    page_is_explore: bool = True
    page_is_explore_users: bool = False
    page_is_explore_organizations: bool = False


class HomeResponse(BaseModel):
    """Home page"""
    template: str
    title: Optional[str] = None
    page_is_home: bool = False
    user: Optional[AccountSummary] = None


class ErrorResponse(BaseModel):
    """Error response"""
    code: int
    message: str
