"""
Domain models - Core business entities
"""
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


class UserType(IntEnum):
    """Kind of account stored in the users table"""
    INDIVIDUAL = 0
    ORGANIZATION = 1


class SortDirection(str, Enum):
    """Ordering direction"""
    ASC = "ASC"
    DESC = "DESC"


class OrderField(str, Enum):
    """Columns a listing can be ordered by"""
    ID = "id"
    CREATED = "created_unix"
    UPDATED = "updated_unix"
    NAME = "name"


@dataclass(frozen=True)
class OrderBy:
    """Ordering directive: one column and a direction"""
    field: OrderField
    direction: SortDirection

    def to_sql(self) -> str:
        return f"{self.field.value} {self.direction.value}"


@dataclass
class User:
    """Account domain model (individual user or organization)"""
    id: int
    name: str
    lower_name: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    type: UserType = UserType.INDIVIDUAL
    avatar_url: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True
    is_admin: bool = False
    num_repos: int = 0
    created_unix: Optional[int] = None
    updated_unix: Optional[int] = None

    def is_organization(self) -> bool:
        """Check if this account is an organization"""
        return self.type == UserType.ORGANIZATION


@dataclass
class Repository:
    """Repository domain model"""
    id: int
    owner_id: int
    name: str
    lower_name: Optional[str] = None
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
    owner: Optional[User] = None

    def full_name(self) -> str:
        """Return "owner/name" once the owner is loaded, otherwise the bare name"""
        if self.owner is None:
            return self.name
        return f"{self.owner.name}/{self.name}"


@dataclass
class SearchOptions:
    """Arguments handed to the listing and keyword-search data operations"""
    order_by: OrderBy
    page: int = 1
    page_size: int = 20
    keyword: str = ""
    private: bool = False
    searcher: Optional[User] = None
    user_type: Optional[UserType] = None
    search_by_email: bool = False

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size
