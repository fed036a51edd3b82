"""Tests for post search, sorting and pagination."""

from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from postboard.posts.models import Post
from postboard.posts.query import PostQuery, paginate, positive_int


BASE = datetime(2024, 1, 1, tzinfo=UTC)


def make_post(title: str, content: str = "body", minutes: int = 0) -> Post:
    at = BASE + timedelta(minutes=minutes)
    return Post(
        user_id=uuid4(), title=title, content=content, created_at=at, updated_at=at
    )


class TestPositiveInt:
    @pytest.mark.parametrize(
        "value,expected",
        [("3", 3), (7, 7), (" 2 ", 2), ("0", 5), ("-1", 5), ("abc", 5), (None, 5)],
    )
    def test_coercion(self, value, expected) -> None:
        assert positive_int(value, 5) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [("3.0", 3), ("1e1", 10), ("2.5", 5), ("inf", 5), ("nan", 5), ("", 5)],
    )
    def test_numeric_strings_with_integer_value(self, value, expected) -> None:
        assert positive_int(value, 5) == expected

    def test_booleans_are_not_numbers(self) -> None:
        assert positive_int(True, 5) == 5


class TestPostQuery:
    def test_defaults(self) -> None:
        query = PostQuery.from_params()
        assert (query.page, query.limit, query.skip) == (1, 5, 0)
        assert query.ascending is False

    def test_invalid_page_and_limit_fall_back(self) -> None:
        query = PostQuery.from_params(page="zero", limit="-3")
        assert (query.page, query.limit) == (1, 5)

    def test_skip(self) -> None:
        assert PostQuery.from_params(page="3", limit="4").skip == 8

    def test_blank_search_matches_everything(self) -> None:
        query = PostQuery.from_params(q="   ")
        assert query.q is None
        assert query.matches(make_post("anything"))

    def test_search_title_or_content_case_insensitive(self) -> None:
        query = PostQuery.from_params(q="HeLLo")
        assert query.matches(make_post("Say hello"))
        assert query.matches(make_post("Other", content="well HELLO there"))
        assert not query.matches(make_post("Other", content="nothing"))


class TestPaginate:
    def test_default_sort_is_newest_update_first(self) -> None:
        posts = [make_post("a", minutes=1), make_post("b", minutes=3), make_post("c")]

        page = paginate(posts, PostQuery.from_params())

        assert [p.title for p in page.posts] == ["b", "a", "c"]
        assert page.total_count == 3

    def test_sort_by_title_ascending(self) -> None:
        posts = [make_post("beta"), make_post("alpha"), make_post("gamma")]

        page = paginate(posts, PostQuery.from_params(sort_by="title", direction="asc"))

        assert [p.title for p in page.posts] == ["alpha", "beta", "gamma"]

    def test_any_other_direction_is_descending(self) -> None:
        posts = [make_post("beta"), make_post("alpha")]

        page = paginate(
            posts, PostQuery.from_params(sort_by="title", direction="sideways")
        )

        assert [p.title for p in page.posts] == ["beta", "alpha"]

    def test_window_and_total_count(self) -> None:
        posts = [make_post(f"post {i}", minutes=i) for i in range(7)]

        page = paginate(posts, PostQuery.from_params(page="2", limit="3"))

        assert [p.title for p in page.posts] == ["post 3", "post 2", "post 1"]
        assert (page.page, page.limit, page.total_count) == (2, 3, 7)

    def test_page_past_the_end_is_empty(self) -> None:
        posts = [make_post("only")]

        page = paginate(posts, PostQuery.from_params(page="4"))

        assert page.posts == []
        assert page.total_count == 1

    def test_total_count_ignores_window_but_honors_search(self) -> None:
        posts = [make_post("cat one"), make_post("dog"), make_post("cat two")]

        page = paginate(posts, PostQuery.from_params(q="cat", limit="1"))

        assert len(page.posts) == 1
        assert page.total_count == 2

    def test_ties_are_stable_across_pages(self) -> None:
        posts = [make_post("same") for _ in range(4)]
        query_1 = PostQuery.from_params(limit="2", page="1")
        query_2 = PostQuery.from_params(limit="2", page="2")

        first = paginate(list(posts), query_1).posts
        second = paginate(list(reversed(posts)), query_2).posts

        assert {p.id for p in first}.isdisjoint({p.id for p in second})
