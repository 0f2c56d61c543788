"""
PyTest configuration and fixtures for Explore Service tests

Provides:
- In-memory repository and account stores implementing the domain interfaces
- Settings with a small page size
- Async test client over the FastAPI app (in-memory, no server or database)
"""
from typing import List, Optional, Tuple

import httpx
import pytest

from explore_service.config import Settings
from explore_service.domain.models import (
    OrderBy,
    Repository,
    SearchOptions,
    SortDirection,
    User,
    UserType,
)
from explore_service.domain.repositories import IRepositoryRepository, IUserRepository
from explore_service.application.services import ExploreService, HomeService


# ============================================================================
# In-memory stores
# ============================================================================

def _sort(items: list, order_by: OrderBy) -> list:
    return sorted(
        items,
        key=lambda item: getattr(item, order_by.field.value),
        reverse=order_by.direction == SortDirection.DESC,
    )


def _page(items: list, opts: SearchOptions) -> list:
    return items[opts.offset:opts.offset + opts.page_size]


class InMemoryUserRepository(IUserRepository):
    """Account store backed by a list"""

    def __init__(self, users: List[User]):
        self.accounts = list(users)
        self.calls: List[tuple] = []

    def _of_type(self, user_type: UserType) -> List[User]:
        return [user for user in self.accounts if user.type == user_type]

    async def find_by_id(self, user_id: int) -> Optional[User]:
        for user in self.accounts:
            if user.id == user_id:
                return user
        return None

    async def count_users(self) -> int:
        self.calls.append(("count_users",))
        return len(self._of_type(UserType.INDIVIDUAL))

    async def count_organizations(self) -> int:
        self.calls.append(("count_organizations",))
        return len(self._of_type(UserType.ORGANIZATION))

    async def users(self, opts: SearchOptions) -> List[User]:
        self.calls.append(("users", opts))
        return _page(_sort(self._of_type(UserType.INDIVIDUAL), opts.order_by), opts)

    async def organizations(self, opts: SearchOptions) -> List[User]:
        self.calls.append(("organizations", opts))
        return _page(_sort(self._of_type(UserType.ORGANIZATION), opts.order_by), opts)

    async def search_user_by_name(self, opts: SearchOptions) -> Tuple[List[User], int]:
        self.calls.append(("search_user_by_name", opts))
        keyword = opts.keyword.lower()

        def matches(user: User) -> bool:
            if keyword in user.name.lower() or keyword in (user.full_name or "").lower():
                return True
            return opts.search_by_email and keyword in (user.email or "").lower()

        found = [user for user in self._of_type(opts.user_type) if matches(user)]
        return _page(_sort(found, opts.order_by), opts), len(found)


class InMemoryRepositoryRepository(IRepositoryRepository):
    """Code repository store backed by a list"""

    def __init__(self, repos: List[Repository], user_repo: InMemoryUserRepository):
        self.repos = list(repos)
        self.user_repo = user_repo
        self.calls: List[tuple] = []

    def _visible(self, opts: SearchOptions) -> List[Repository]:
        searcher = opts.searcher
        return [
            repo for repo in self.repos
            if not repo.is_private
            or opts.private
            or (searcher is not None and (searcher.is_admin or searcher.id == repo.owner_id))
        ]

    async def count_repositories(self, private: bool) -> int:
        self.calls.append(("count_repositories", private))
        return len([repo for repo in self.repos if private or not repo.is_private])

    async def get_recent_updated_repositories(self, opts: SearchOptions) -> List[Repository]:
        self.calls.append(("get_recent_updated_repositories", opts))
        return _page(_sort(self._visible(opts), opts.order_by), opts)

    async def search_repository_by_name(self, opts: SearchOptions) -> Tuple[List[Repository], int]:
        self.calls.append(("search_repository_by_name", opts))
        found = [repo for repo in self._visible(opts) if opts.keyword.lower() in repo.name.lower()]
        return _page(_sort(found, opts.order_by), opts), len(found)

    async def get_owner(self, repo: Repository) -> User:
        owner = await self.user_repo.find_by_id(repo.owner_id)
        if owner is None:
            raise LookupError(f"user does not exist [uid: {repo.owner_id}]")
        repo.owner = owner
        return owner


# ============================================================================
# Data builders
# ============================================================================

def make_user(user_id: int, name: str, **kwargs) -> User:
    return User(
        id=user_id,
        name=name,
        lower_name=name.lower(),
        email=f"{name.lower()}@example.com",
        created_unix=1000 + user_id,
        updated_unix=5000 - user_id,
        **kwargs
    )


def make_repos(count: int, owner_id: int = 1) -> List[Repository]:
    return [
        Repository(
            id=i,
            owner_id=owner_id,
            name=f"repo-{i:02d}",
            lower_name=f"repo-{i:02d}",
            created_unix=1000 + i,
            updated_unix=9000 - i,
        )
        for i in range(1, count + 1)
    ]


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(
        EXPLORE_PAGING_NUM=10,
        SHOW_USER_EMAIL=True,
        EXPLORE_SEARCH_BY_EMAIL=False,
        REGISTER_EMAIL_CONFIRM=True,
        APP_SUB_URL="",
    )


@pytest.fixture
def accounts() -> List[User]:
    return [
        make_user(1, "alice", full_name="Alice Liddell"),
        make_user(2, "bob", full_name="Bob Builder"),
        make_user(3, "carol"),
        make_user(4, "acme", type=UserType.ORGANIZATION, full_name="Acme Corp"),
        make_user(5, "zeta", type=UserType.ORGANIZATION),
    ]


@pytest.fixture
def user_repo(accounts) -> InMemoryUserRepository:
    return InMemoryUserRepository(accounts)


@pytest.fixture
def repo_repo(user_repo) -> InMemoryRepositoryRepository:
    return InMemoryRepositoryRepository(make_repos(12), user_repo)


@pytest.fixture
def explore_service(repo_repo, user_repo, settings) -> ExploreService:
    return ExploreService(repo_repo, user_repo, settings)


@pytest.fixture
async def client(explore_service, user_repo, settings):
    """Async client over the app with in-memory stores injected"""
    from explore_service.main import app
    from explore_service.api.dependencies import (
        get_explore_service,
        get_home_service,
        get_user_repository,
    )

    app.dependency_overrides[get_explore_service] = lambda: explore_service
    app.dependency_overrides[get_home_service] = lambda: HomeService(settings)
    app.dependency_overrides[get_user_repository] = lambda: user_repo

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
