"""Tests for building the book tree."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from pydantic import ValidationError
from wp_fakes import FakeWordPress, chapter, failing_then, section, topic

from wpbook.exceptions import FetchError
from wpbook.schemas import ProgressUpdate
from wpbook.tree_fetcher import TreeFetchOptions, fetch_tree

NO_WAIT = TreeFetchOptions(backoff_s=0)


@pytest.fixture
def site() -> FakeWordPress:
    """A book (1) with two chapters, plus noise belonging to book 2."""
    return FakeWordPress(
        {
            "chapter": [
                chapter(10, 1, "Second chapter"),
                chapter(9, 1, "First chapter"),
                chapter(8, 2, "Other book"),
            ],
            "chaptertopic": [
                topic(22, 9),
                topic(21, 9),
                topic(23, 10),
                topic(24, 8),
                topic(25, None),
            ],
            "topicsection": [
                section(33, 21),
                section(31, 21),
                section(32, 22),
                section(34, 99),
            ],
        }
    )


class TestFetchTree:
    """Tests for fetch_tree function."""

    @pytest.mark.asyncio
    async def test_chapters_filtered_and_sorted(self, site: FakeWordPress) -> None:
        tree = await fetch_tree(1, client=site, options=NO_WAIT)

        assert tree.book_id == 1
        assert [ch.id for ch in tree.chapters] == [9, 10]

    @pytest.mark.asyncio
    async def test_full_hierarchy(self, site: FakeWordPress) -> None:
        tree = await fetch_tree(1, client=site, options=NO_WAIT)

        first, second = tree.chapters
        assert [t.id for t in first.topics] == [21, 22]
        assert [t.id for t in second.topics] == [23]
        assert [s.id for s in first.topics[0].sections] == [31, 33]
        assert [s.id for s in first.topics[1].sections] == [32]
        assert second.topics[0].sections == ()

    @pytest.mark.asyncio
    async def test_no_orphans(self, site: FakeWordPress) -> None:
        tree = await fetch_tree(1, client=site, options=NO_WAIT)

        for ch in tree.chapters:
            assert ch.parent_id == tree.book_id
            for t in ch.topics:
                assert t.parent_id == ch.id
                for s in t.sections:
                    assert s.parent_id == t.id

    @pytest.mark.asyncio
    async def test_no_matching_chapters_is_empty_tree(self, site: FakeWordPress) -> None:
        tree = await fetch_tree(3, client=site, options=NO_WAIT)

        assert tree.chapters == ()
        assert site.request_counts() == {"chapter": 1}

    @pytest.mark.asyncio
    async def test_string_parent_references_match(self) -> None:
        client = FakeWordPress(
            {
                "chapter": [chapter(5, "1")],
                "chaptertopic": [topic(6, ["5"])],
                "topicsection": [section(7, {"ID": 6})],
            }
        )

        tree = await fetch_tree(1, client=client, options=NO_WAIT)

        assert tree.chapters[0].topics[0].sections[0].id == 7

    @pytest.mark.asyncio
    async def test_non_ascii_digit_parent_is_dropped(self) -> None:
        client = FakeWordPress(
            {"chapter": [chapter(5, "²"), chapter(6, 1)], "chaptertopic": [], "topicsection": []}
        )

        tree = await fetch_tree(1, client=client, options=NO_WAIT)

        assert [node.id for node in tree.chapters] == [6]

    @pytest.mark.asyncio
    async def test_placeholders_for_missing_title(self) -> None:
        raw_chapter = chapter(5, 1)
        del raw_chapter["title"]
        del raw_chapter["content"]
        client = FakeWordPress({"chapter": [raw_chapter], "chaptertopic": [], "topicsection": []})

        tree = await fetch_tree(1, client=client, options=NO_WAIT)

        assert tree.chapters[0].title == "Chapter 5"
        assert tree.chapters[0].content == ""

    @pytest.mark.asyncio
    async def test_collections_fetched_once_by_default(self, site: FakeWordPress) -> None:
        await fetch_tree(1, client=site, options=NO_WAIT)

        assert site.request_counts() == {"chapter": 1, "chaptertopic": 1, "topicsection": 1}

    @pytest.mark.asyncio
    async def test_refetch_per_parent(self, site: FakeWordPress) -> None:
        tree = await fetch_tree(1, client=site, options=TreeFetchOptions(refetch_per_parent=True, backoff_s=0))

        # one topic request per chapter, one section request per topic
        assert site.request_counts() == {"chapter": 1, "chaptertopic": 2, "topicsection": 3}
        assert [ch.id for ch in tree.chapters] == [9, 10]

    @pytest.mark.asyncio
    async def test_same_tree_in_both_modes(self, site: FakeWordPress) -> None:
        cached = await fetch_tree(1, client=site, options=NO_WAIT)
        refetched = await fetch_tree(1, client=site, options=TreeFetchOptions(refetch_per_parent=True, backoff_s=0))

        assert cached == refetched

    @pytest.mark.asyncio
    async def test_progress_messages(self, site: FakeWordPress) -> None:
        updates: list[ProgressUpdate] = []

        await fetch_tree(1, client=site, options=NO_WAIT, on_progress=updates.append)

        assert [(u.step, u.message) for u in updates] == [
            ("chapters", "Fetching chapters..."),
            ("topics", "Fetching topics for chapter 1/2..."),
            ("sections", "Fetching sections for topic 1/2 in chapter 1..."),
            ("sections", "Fetching sections for topic 2/2 in chapter 1..."),
            ("topics", "Fetching topics for chapter 2/2..."),
            ("sections", "Fetching sections for topic 1/1 in chapter 2..."),
        ]

    @pytest.mark.asyncio
    async def test_retries_each_tier(self) -> None:
        client = FakeWordPress(
            {
                "chapter": failing_then([chapter(5, 1)], failures=2),
                "chaptertopic": failing_then([topic(6, 5)], failures=1),
                "topicsection": failing_then([section(7, 6)], failures=2, status_code=502),
            }
        )

        tree = await fetch_tree(1, client=client, options=TreeFetchOptions(max_attempts=3, backoff_s=0))

        assert tree.chapters[0].topics[0].sections[0].id == 7
        assert client.request_counts() == {"chapter": 3, "chaptertopic": 2, "topicsection": 3}

    @pytest.mark.asyncio
    async def test_exhausted_retries_propagate(self) -> None:
        client = FakeWordPress(
            {
                "chapter": [chapter(5, 1)],
                "chaptertopic": lambda url: httpx.Response(503),
                "topicsection": [],
            }
        )

        with patch("wpbook.http_utils.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            with pytest.raises(FetchError, match="gave up after 3 attempts"):
                await fetch_tree(1, client=client, options=TreeFetchOptions(max_attempts=3, backoff_s=1.0))

        assert client.request_counts()["chaptertopic"] == 3
        assert [c.args[0] for c in mock_sleep.await_args_list] == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_tree_is_immutable(self, site: FakeWordPress) -> None:
        tree = await fetch_tree(1, client=site, options=NO_WAIT)

        with pytest.raises(ValidationError):
            tree.book_id = 2
