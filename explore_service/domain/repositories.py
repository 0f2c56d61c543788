"""
Repository interfaces - Define contracts for data access
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple
from .models import User, Repository, SearchOptions


class IRepositoryRepository(ABC):
    """Code repository data access interface"""

    @abstractmethod
    async def count_repositories(self, private: bool) -> int:
        """Count repositories, including private ones when private is True"""
        pass

    @abstractmethod
    async def get_recent_updated_repositories(self, opts: SearchOptions) -> List[Repository]:
        """Return one page of repositories visible to opts.searcher"""
        pass

    @abstractmethod
    async def search_repository_by_name(self, opts: SearchOptions) -> Tuple[List[Repository], int]:
        """Return one page of repositories matching opts.keyword and the total match count"""
        pass

    @abstractmethod
    async def get_owner(self, repo: Repository) -> User:
        """Load and attach the owning account of a repository"""
        pass


class IUserRepository(ABC):
    """Account data access interface"""

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[User]:
        """Find account by ID"""
        pass

    @abstractmethod
    async def count_users(self) -> int:
        """Count individual users"""
        pass

    @abstractmethod
    async def count_organizations(self) -> int:
        """Count organizations"""
        pass

    @abstractmethod
    async def users(self, opts: SearchOptions) -> List[User]:
        """Return one page of individual users"""
        pass

    @abstractmethod
    async def organizations(self, opts: SearchOptions) -> List[User]:
        """Return one page of organizations"""
        pass

    @abstractmethod
    async def search_user_by_name(self, opts: SearchOptions) -> Tuple[List[User], int]:
        """Return one page of accounts of opts.user_type matching opts.keyword and the total match count"""
        pass
