"""Assemble a book's chapter/topic/section hierarchy from flat collections."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from wpbook.http_utils import create_client, fetch_collection_with_retries
from wpbook.schemas import BookTree, ChapterNode, Item, ProgressUpdate, SectionNode, TopicNode
from wpbook.schemas.progress import ProgressCallback, ProgressStep
from wpbook.utils.logging_config import get_logger
from wpbook.wordpress import CHAPTERS, SECTIONS, TOPICS, TierEndpoint, parse_child, tier_url

logger = get_logger(__name__)


@dataclass
class TreeFetchOptions:
    """Options for building a book tree.

    Attributes:
        base_url: REST base override. Defaults to ``WPBOOK_BASE_URL``.
        refetch_per_parent: If True, request the topic collection once per
            chapter and the section collection once per topic. If False
            (default), each collection is requested at most once per build and
            filtered in memory; the resulting tree is identical.
        max_attempts: Attempts per collection request. Defaults to config.
        backoff_s: Linear backoff base in seconds. Defaults to config.
    """

    base_url: str | None = None
    refetch_per_parent: bool = False
    max_attempts: int | None = None
    backoff_s: float | None = None


class _TierCollection:
    """Lazily fetched view over one tier's full collection."""

    def __init__(
        self,
        endpoint: TierEndpoint,
        *,
        client: httpx.AsyncClient,
        options: TreeFetchOptions,
    ) -> None:
        self._endpoint = endpoint
        self._client = client
        self._options = options
        self._items: list[Item] | None = None

    async def children_of(self, parent_id: int) -> list[Item]:
        """Items whose parent reference equals ``parent_id``, ascending by id."""
        items = await self._load()
        children = [item for item in items if item.parent_id == parent_id]
        children.sort(key=lambda item: item.id)
        return children

    async def _load(self) -> list[Item]:
        if self._items is not None and not self._options.refetch_per_parent:
            return self._items

        raw_items = await fetch_collection_with_retries(
            tier_url(self._endpoint, self._options.base_url),
            client=self._client,
            max_attempts=self._options.max_attempts,
            backoff_s=self._options.backoff_s,
        )
        items = [
            item
            for item in (parse_child(raw, self._endpoint) for raw in raw_items)
            if item is not None
        ]
        self._items = items
        return items


async def fetch_tree(
    root_id: int,
    *,
    options: TreeFetchOptions | None = None,
    client: httpx.AsyncClient | None = None,
    on_progress: ProgressCallback | None = None,
) -> BookTree:
    """Fetch every chapter, topic and section belonging to a book.

    Tiers and siblings are fetched strictly one after another. Children whose
    parent reference does not match are dropped silently. A book without
    matching chapters yields a tree with no chapters.

    Args:
        root_id: Book id.
        options: Fetch options. Uses defaults if None.
        client: Optional shared client. A new one is created if omitted.
        on_progress: Called synchronously at each phase transition.

    Returns:
        The assembled, immutable tree.

    Raises:
        FetchError: If any collection request exhausts its retries.
    """
    opts = options or TreeFetchOptions()

    if client is not None:
        return await _build_tree(root_id, client=client, options=opts, on_progress=on_progress)

    async with create_client() as new_client:
        return await _build_tree(root_id, client=new_client, options=opts, on_progress=on_progress)


async def _build_tree(
    root_id: int,
    *,
    client: httpx.AsyncClient,
    options: TreeFetchOptions,
    on_progress: ProgressCallback | None,
) -> BookTree:
    def report(step: ProgressStep, message: str) -> None:
        if on_progress is not None:
            on_progress(ProgressUpdate(step=step, message=message))

    chapters_source = _TierCollection(CHAPTERS, client=client, options=options)
    topics_source = _TierCollection(TOPICS, client=client, options=options)
    sections_source = _TierCollection(SECTIONS, client=client, options=options)

    report("chapters", "Fetching chapters...")
    chapters = await chapters_source.children_of(root_id)
    logger.info("Found chapters", extra={"book_id": root_id, "count": len(chapters)})

    chapter_nodes: list[ChapterNode] = []
    for i, chapter in enumerate(chapters, start=1):
        report("topics", f"Fetching topics for chapter {i}/{len(chapters)}...")
        topics = await topics_source.children_of(chapter.id)
        logger.debug("Found topics", extra={"chapter_id": chapter.id, "count": len(topics)})

        topic_nodes: list[TopicNode] = []
        for j, topic in enumerate(topics, start=1):
            report(
                "sections",
                f"Fetching sections for topic {j}/{len(topics)} in chapter {i}...",
            )
            sections = await sections_source.children_of(topic.id)
            logger.debug("Found sections", extra={"topic_id": topic.id, "count": len(sections)})

            topic_nodes.append(
                TopicNode(
                    id=topic.id,
                    title=topic.title,
                    content=topic.content,
                    parent_id=chapter.id,
                    sections=tuple(
                        SectionNode(
                            id=section.id,
                            title=section.title,
                            content=section.content,
                            parent_id=topic.id,
                        )
                        for section in sections
                    ),
                )
            )

        chapter_nodes.append(
            ChapterNode(
                id=chapter.id,
                title=chapter.title,
                content=chapter.content,
                parent_id=root_id,
                topics=tuple(topic_nodes),
            )
        )

    return BookTree(book_id=root_id, chapters=tuple(chapter_nodes))
