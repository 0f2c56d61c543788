"""
Repository implementations - Data access layer
"""
from typing import Optional, List, Tuple, Dict, Any

from ...domain.models import User, UserType, Repository, SearchOptions
from ...domain.repositories import IRepositoryRepository, IUserRepository
from .connection import DatabaseConnection


REPOSITORY_COLUMNS = """
    id, owner_id, name, lower_name, description, website,
    is_private, is_fork, is_mirror, num_stars, num_forks, num_watches,
    created_unix, updated_unix
"""

USER_COLUMNS = """
    id, name, lower_name, full_name, email, type, avatar AS avatar_url,
    location, website, description, is_active, is_admin, num_repos,
    created_unix, updated_unix
"""

# Visible when public, when private ones were asked for, or when the
# searcher is an admin, the owner, or a member of the owning organization.
# $1 = include private, $2 = searcher id, $3 = searcher is admin
REPOSITORY_VISIBILITY = """
    (
        is_private = false
        OR $1::bool
        OR $3::bool
        OR owner_id = $2::bigint
        OR owner_id IN (SELECT org_id FROM org_user WHERE uid = $2::bigint)
    )
"""


def _like_pattern(keyword: str) -> str:
    return f"%{keyword.lower()}%"


def _visibility_args(opts: SearchOptions) -> Tuple[bool, Optional[int], bool]:
    searcher = opts.searcher
    if searcher is None:
        return opts.private, None, False
    return opts.private, searcher.id, searcher.is_admin


class RepositoryRepository(IRepositoryRepository):
    """Code repository data access using PostgreSQL"""

    def __init__(self, db: DatabaseConnection, user_repository: "UserRepository"):
        self.db = db
        self.user_repo = user_repository

    def _row_to_repository(self, row: Optional[Dict[str, Any]]) -> Optional[Repository]:
        """Convert database row to Repository model"""
        if not row:
            return None
        return Repository(**dict(row))

    async def count_repositories(self, private: bool) -> int:
        """Count repositories, including private ones when private is True"""
        count = await self.db.fetch_val(
            "SELECT COUNT(*) FROM repository WHERE ($1::bool OR is_private = false)",
            private
        )
        return count or 0

    async def get_recent_updated_repositories(self, opts: SearchOptions) -> List[Repository]:
        """Return one page of repositories visible to opts.searcher"""
        rows = await self.db.fetch_all(
            f"""
            SELECT {REPOSITORY_COLUMNS}
            FROM repository
            WHERE {REPOSITORY_VISIBILITY}
            ORDER BY {opts.order_by.to_sql()}
            LIMIT $4 OFFSET $5
            """,
            *_visibility_args(opts),
            opts.page_size,
            opts.offset
        )
        return [self._row_to_repository(row) for row in rows]

    async def search_repository_by_name(self, opts: SearchOptions) -> Tuple[List[Repository], int]:
        """Return one page of repositories whose name contains opts.keyword and the match count"""
        condition = f"lower_name LIKE $4 AND {REPOSITORY_VISIBILITY}"
        args = (*_visibility_args(opts), _like_pattern(opts.keyword))

        async with self.db.snapshot() as conn:
            count = await conn.fetchval(
                f"SELECT COUNT(*) FROM repository WHERE {condition}",
                *args
            )
            rows = await conn.fetch(
                f"""
                SELECT {REPOSITORY_COLUMNS}
                FROM repository
                WHERE {condition}
                ORDER BY {opts.order_by.to_sql()}
                LIMIT $5 OFFSET $6
                """,
                *args,
                opts.page_size,
                opts.offset
            )

        return [self._row_to_repository(row) for row in rows], count or 0

    async def get_owner(self, repo: Repository) -> User:
        """Load and attach the owning account of a repository"""
        if repo.owner is not None:
            return repo.owner

        owner = await self.user_repo.find_by_id(repo.owner_id)
        if owner is None:
            raise LookupError(f"user does not exist [uid: {repo.owner_id}]")

        repo.owner = owner
        return owner


class UserRepository(IUserRepository):
    """Account data access using PostgreSQL"""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def _row_to_user(self, row: Optional[Dict[str, Any]]) -> Optional[User]:
        """Convert database row to User model"""
        if not row:
            return None
        data = dict(row)
        data["type"] = UserType(data["type"])
        return User(**data)

    async def find_by_id(self, user_id: int) -> Optional[User]:
        """Find account by ID"""
        row = await self.db.fetch_one(
            f'SELECT {USER_COLUMNS} FROM "user" WHERE id = $1',
            user_id
        )
        return self._row_to_user(row)

    async def _count_by_type(self, user_type: UserType) -> int:
        count = await self.db.fetch_val(
            'SELECT COUNT(*) FROM "user" WHERE type = $1',
            int(user_type)
        )
        return count or 0

    async def _list_by_type(self, user_type: UserType, opts: SearchOptions) -> List[User]:
        rows = await self.db.fetch_all(
            f"""
            SELECT {USER_COLUMNS}
            FROM "user"
            WHERE type = $1
            ORDER BY {opts.order_by.to_sql()}
            LIMIT $2 OFFSET $3
            """,
            int(user_type),
            opts.page_size,
            opts.offset
        )
        return [self._row_to_user(row) for row in rows]

    async def count_users(self) -> int:
        """Count individual users"""
        return await self._count_by_type(UserType.INDIVIDUAL)

    async def count_organizations(self) -> int:
        """Count organizations"""
        return await self._count_by_type(UserType.ORGANIZATION)

    async def users(self, opts: SearchOptions) -> List[User]:
        """Return one page of individual users"""
        return await self._list_by_type(UserType.INDIVIDUAL, opts)

    async def organizations(self, opts: SearchOptions) -> List[User]:
        """Return one page of organizations"""
        return await self._list_by_type(UserType.ORGANIZATION, opts)

    async def search_user_by_name(self, opts: SearchOptions) -> Tuple[List[User], int]:
        """
        Return one page of accounts matching opts.keyword and the match count

        Matches login name and full name, and email when opts.search_by_email
        is set. Only accounts of opts.user_type are considered.
        """
        user_type = opts.user_type if opts.user_type is not None else UserType.INDIVIDUAL
        condition = """
            type = $1
            AND (
                lower_name LIKE $2
                OR LOWER(full_name) LIKE $2
                OR ($3::bool AND LOWER(email) LIKE $2)
            )
        """
        args = (int(user_type), _like_pattern(opts.keyword), opts.search_by_email)

        async with self.db.snapshot() as conn:
            count = await conn.fetchval(
                f'SELECT COUNT(*) FROM "user" WHERE {condition}',
                *args
            )
            rows = await conn.fetch(
                f"""
                SELECT {USER_COLUMNS}
                FROM "user"
                WHERE {condition}
                ORDER BY {opts.order_by.to_sql()}
                LIMIT $4 OFFSET $5
                """,
                *args,
                opts.page_size,
                opts.offset
            )

        return [self._row_to_user(row) for row in rows], count or 0
