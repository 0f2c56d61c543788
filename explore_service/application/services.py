"""
Application services - Business logic layer

This module wires the explore pages onto the shared listing executor:
- Explore repositories
- Explore users
- Explore organizations
- Home page routing
"""
from dataclasses import dataclass, field
from typing import Dict, Optional
import logging

from ..config import Settings
from ..domain.models import User, UserType
from ..domain.repositories import IRepositoryRepository, IUserRepository
from .listing import (
    ListingOptions,
    ResultPage,
    SearchRequest,
    execute_listing,
    resolve_repository_order,
    resolve_user_order,
    REPOSITORY_PAGE_FLOOR,
    ACCOUNT_PAGE_FLOOR,
)

logger = logging.getLogger(__name__)


# Template names handed to the renderer
TPL_HOME = "home"
TPL_EXPLORE_REPOS = "explore/repos"
TPL_EXPLORE_USERS = "explore/users"
TPL_EXPLORE_ORGANIZATIONS = "explore/organizations"
TPL_ACTIVATE = "user/auth/activate"
TPL_DASHBOARD = "user/dashboard/dashboard"


@dataclass
class ExploreView:
    """Listing result plus the page it should be rendered with"""
    template: str
    result: ResultPage
    title: str = "explore"
    flags: Dict[str, bool] = field(default_factory=dict)


@dataclass
class HomeView:
    """Outcome of the home page: a template to render or a redirect"""
    template: Optional[str] = None
    redirect_to: Optional[str] = None
    title: Optional[str] = None
    page_is_home: bool = False
    user: Optional[User] = None


class ExploreService:
    """Explore service - lists repositories and accounts"""

    def __init__(
        self,
        repo_repository: IRepositoryRepository,
        user_repository: IUserRepository,
        settings: Settings
    ):
        self.repo_repo = repo_repository
        self.user_repo = user_repository
        self.settings = settings

    async def explore_repositories(
        self,
        request: SearchRequest,
        requester: Optional[User] = None
    ) -> ExploreView:
        """List repositories visible to the requester"""
        options = ListingOptions(
            page_size=self.settings.EXPLORE_PAGING_NUM,
            counter=self.repo_repo.count_repositories,
            ranger=self.repo_repo.get_recent_updated_repositories,
            searcher=self.repo_repo.search_repository_by_name,
            searcher_name="SearchRepositoryByName",
            order_by=resolve_repository_order,
            page_floor=REPOSITORY_PAGE_FLOOR,
            hydrate=self.repo_repo.get_owner,
            requester=requester,
        )
        result = await execute_listing(request, options)

        return ExploreView(
            template=TPL_EXPLORE_REPOS,
            result=result,
            flags={"page_is_explore": True, "page_is_explore_repositories": True},
        )

    async def explore_users(self, request: SearchRequest) -> ExploreView:
        """List individual user accounts"""
        result = await execute_listing(
            request,
            self._account_options(
                UserType.INDIVIDUAL,
                counter=self.user_repo.count_users,
                ranger=self.user_repo.users,
            ),
        )

        return ExploreView(
            template=TPL_EXPLORE_USERS,
            result=result,
            flags={"page_is_explore": True, "page_is_explore_users": True},
        )

    async def explore_organizations(self, request: SearchRequest) -> ExploreView:
        """List organization accounts"""
        result = await execute_listing(
            request,
            self._account_options(
                UserType.ORGANIZATION,
                counter=self.user_repo.count_organizations,
                ranger=self.user_repo.organizations,
            ),
        )

        return ExploreView(
            template=TPL_EXPLORE_ORGANIZATIONS,
            result=result,
            flags={"page_is_explore": True, "page_is_explore_organizations": True},
        )

    def _account_options(self, user_type: UserType, counter, ranger) -> ListingOptions:
        """Build the listing options shared by both account pages"""

        # Account counters take no visibility flag
        async def count(private: bool) -> int:
            return await counter()

        return ListingOptions(
            page_size=self.settings.EXPLORE_PAGING_NUM,
            counter=count,
            ranger=ranger,
            searcher=self.user_repo.search_user_by_name,
            searcher_name="SearchUserByName",
            order_by=resolve_user_order,
            page_floor=ACCOUNT_PAGE_FLOOR,
            user_type=user_type,
            search_by_email=self.settings.EXPLORE_SEARCH_BY_EMAIL,
            show_email=self.settings.SHOW_USER_EMAIL,
        )


class HomeService:
    """Home service - decides what the landing page shows"""

    def __init__(self, settings: Settings):
        self.settings = settings

    def resolve(
        self,
        current_user: Optional[User],
        remembered_username: Optional[str] = None
    ) -> HomeView:
        """
        Resolve the home page for the current visitor

        Signed-in users get their dashboard, or the activation page when
        their account still awaits email confirmation. Anonymous visitors
        with a remembered login are sent to the login page.
        """
        if current_user is not None:
            if not current_user.is_active and self.settings.REGISTER_EMAIL_CONFIRM:
                return HomeView(
                    template=TPL_ACTIVATE,
                    title="auth.active_your_account",
                    user=current_user,
                )
            return HomeView(template=TPL_DASHBOARD, title="dashboard", user=current_user)

        if remembered_username:
            logger.debug(f"Remembered login for {remembered_username}, redirecting to login")
            return HomeView(redirect_to=f"{self.settings.APP_SUB_URL}/user/login")

        return HomeView(template=TPL_HOME, page_is_home=True)
