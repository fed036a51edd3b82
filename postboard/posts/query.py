"""Search, sort and pagination of the post listing.

The whole table is scanned and filtered in process: Cassandra offers
neither substring search nor arbitrary ordering, and the listing needs
an exact ``total_count``.
"""

from dataclasses import dataclass
from typing import Any

from postboard.posts.models import Post


DEFAULT_PAGE = 1
DEFAULT_LIMIT = 5


def positive_int(value: Any, default: int) -> int:
    """Coerce ``value`` to a positive integer, else return ``default``.

    Examples:
        >>> positive_int("3", 5), positive_int("3.0", 5), positive_int("1e1", 5)
        (3, 3, 10)
        >>> positive_int("0", 5), positive_int("2.5", 5), positive_int(None, 5)
        (5, 5, 5)
    """
    if isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return default
    # Rejects fractions as well as inf and nan
    if not number.is_integer() or number <= 0:
        return default
    return int(number)


@dataclass(frozen=True)
class PostQuery:
    """Normalized listing parameters."""

    q: str | None = None
    sort_by: str | None = None
    direction: str | None = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_params(
        cls,
        q: str | None = None,
        sort_by: str | None = None,
        direction: str | None = None,
        page: Any = None,
        limit: Any = None,
    ) -> "PostQuery":
        """Build a query from raw request parameters.

        A ``page`` or ``limit`` that is not a positive integer falls back to
        1 and 5 respectively.
        """
        return cls(
            q=q.strip() if q and q.strip() else None,
            sort_by=sort_by,
            direction=direction,
            page=positive_int(page, DEFAULT_PAGE),
            limit=positive_int(limit, DEFAULT_LIMIT),
        )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def ascending(self) -> bool:
        return self.direction == "asc"

    def matches(self, post: Post) -> bool:
        """Case-insensitive substring match on title or content."""
        if not self.q:
            return True
        needle = self.q.casefold()
        return needle in post.title.casefold() or needle in post.content.casefold()

    def sort_key(self, post: Post) -> tuple:
        # created_at then id break ties
        if self.sort_by == "title":
            return (post.title, post.created_at, str(post.id))
        return (post.updated_at, post.created_at, str(post.id))


@dataclass(frozen=True)
class PostPage:
    posts: list[Post]
    page: int
    limit: int
    total_count: int


def paginate(posts: list[Post], query: PostQuery) -> PostPage:
    """Filter, sort and slice ``posts`` according to ``query``."""
    matching = [post for post in posts if query.matches(post)]
    matching.sort(key=query.sort_key, reverse=not query.ascending)
    return PostPage(
        posts=matching[query.skip : query.skip + query.limit],
        page=query.page,
        limit=query.limit,
        total_count=len(matching),
    )
