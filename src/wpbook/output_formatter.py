"""Format a book tree into a printable HTML or Markdown document."""

from __future__ import annotations

import html
import re
from datetime import datetime
from typing import Literal

from wpbook.markdown import convert_fragment_to_markdown
from wpbook.schemas import BookTree, ChapterNode, GeneratedDocument, SectionNode, TopicNode
from wpbook.wordpress import plain_text

OutputFormat = Literal["html", "markdown"]

_NO_CONTENT_HTML = "<p><em>No content available</em></p>"
_NO_CONTENT_MD = "*No content available*"
_MEDIA_TYPES = {"html": "text/html", "markdown": "text/markdown"}
_EXTENSIONS = {"html": "html", "markdown": "md"}

_STYLESHEET = """\
body {
    font-family: Arial, sans-serif;
    line-height: 1.6;
    margin: 40px;
    color: #333;
}
h1 {
    color: #2c3e50;
    border-bottom: 3px solid #3498db;
    padding-bottom: 10px;
    page-break-before: always;
}
h2 {
    color: #34495e;
    border-bottom: 2px solid #95a5a6;
    padding-bottom: 5px;
    margin-top: 30px;
}
h3 {
    color: #7f8c8d;
    border-bottom: 1px solid #bdc3c7;
    padding-bottom: 3px;
    margin-top: 25px;
}
.book-header {
    text-align: center;
    margin-bottom: 40px;
    page-break-after: always;
}
.book-header h1 {
    page-break-before: avoid;
}
.book-title {
    font-size: 2.5em;
    border-bottom: none;
    margin-bottom: 20px;
}
.chapter-id, .topic-id, .section-id {
    font-size: 0.6em;
    color: #7f8c8d;
    font-weight: normal;
}
.content {
    margin: 20px 0;
    text-align: justify;
}
.structure-info {
    background: #ecf0f1;
    padding: 15px;
    border-radius: 5px;
    margin-bottom: 30px;
}
@media print {
    body { margin: 20px; }
}"""


def format_book(
    tree: BookTree,
    *,
    book_title: str | None = None,
    generated_at: datetime | None = None,
    output_format: OutputFormat = "html",
) -> GeneratedDocument:
    """Render a tree into a document plus a plain-text summary.

    The output depends only on the arguments, so formatting the same tree
    twice yields identical content. ``generated_at`` is printed in the header
    when given.
    """
    if output_format not in _MEDIA_TYPES:
        raise ValueError(f"Unsupported output format: {output_format!r}")

    title = book_title or f"Book {tree.book_id}"
    if output_format == "markdown":
        content = _render_markdown(tree, title=title, generated_at=generated_at)
    else:
        content = _render_html(tree, title=title, generated_at=generated_at)

    summary_lines = [
        f"Book: {plain_text(title)}",
        f"Book ID: {tree.book_id}",
        f"Chapters: {count_chapters(tree)}",
        f"Topics: {count_topics(tree)}",
        f"Sections: {count_sections(tree)}",
    ]

    return GeneratedDocument(
        summary="\n".join(summary_lines),
        content=content,
        filename=output_filename(title, output_format),
        media_type=_MEDIA_TYPES[output_format],
    )


def count_chapters(tree: BookTree) -> int:
    return len(tree.chapters)


def count_topics(tree: BookTree) -> int:
    return sum(len(chapter.topics) for chapter in tree.chapters)


def count_sections(tree: BookTree) -> int:
    return sum(len(topic.sections) for chapter in tree.chapters for topic in chapter.topics)


def output_filename(book_title: str, output_format: OutputFormat = "html") -> str:
    """Download name: every non-alphanumeric character becomes ``_``."""
    slug = re.sub(r"[^a-z0-9]", "_", plain_text(book_title), flags=re.IGNORECASE | re.ASCII).lower()
    return f"{slug}-complete.{_EXTENSIONS[output_format]}"


def _format_timestamp(generated_at: datetime) -> str:
    return generated_at.strftime("%Y-%m-%d %H:%M:%S")


def _render_html(tree: BookTree, *, title: str, generated_at: datetime | None) -> str:
    blocks: list[str] = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '    <meta charset="UTF-8">',
        f"    <title>{html.escape(plain_text(title))} - Complete Content</title>",
        "    <style>",
        _STYLESHEET,
        "    </style>",
        "</head>",
        "<body>",
        '    <div class="book-header">',
        f'        <h1 class="book-title">{title}</h1>',
        "        <h2>Complete Book Content</h2>",
        '        <div class="structure-info">',
        "            <strong>Content Structure:</strong><br>",
        f"            Book ID: {tree.book_id}<br>",
        f"            {count_chapters(tree)} Chapters<br>",
        f"            {count_topics(tree)} Topics<br>",
        f"            {count_sections(tree)} Sections",
        "        </div>",
    ]
    if generated_at is not None:
        blocks.append(f"        <p><em>Generated on: {_format_timestamp(generated_at)}</em></p>")
    blocks.append("    </div>")

    for chapter in tree.chapters:
        blocks.extend(_render_chapter_html(chapter))

    blocks.extend(["</body>", "</html>"])
    return "\n".join(blocks) + "\n"


def _render_chapter_html(chapter: ChapterNode) -> list[str]:
    blocks = [
        f'    <h1>{chapter.title} <span class="chapter-id">(ID: {chapter.id})</span></h1>',
        f'    <div class="content">{chapter.content or _NO_CONTENT_HTML}</div>',
    ]
    for topic in chapter.topics:
        blocks.extend(_render_topic_html(topic))
    return blocks


def _render_topic_html(topic: TopicNode) -> list[str]:
    blocks = [
        f'    <h2>{topic.title} <span class="topic-id">(ID: {topic.id})</span></h2>',
        f'    <div class="content">{topic.content or _NO_CONTENT_HTML}</div>',
    ]
    for section in topic.sections:
        blocks.extend(_render_section_html(section))
    return blocks


def _render_section_html(section: SectionNode) -> list[str]:
    return [
        f'    <h3>{section.title} <span class="section-id">(ID: {section.id})</span></h3>',
        f'    <div class="content">{section.content or _NO_CONTENT_HTML}</div>',
    ]


def _render_markdown(tree: BookTree, *, title: str, generated_at: datetime | None) -> str:
    blocks: list[str] = [
        f"# {plain_text(title)}",
        "\n".join(
            [
                f"- Book ID: {tree.book_id}",
                f"- Chapters: {count_chapters(tree)}",
                f"- Topics: {count_topics(tree)}",
                f"- Sections: {count_sections(tree)}",
            ]
        ),
    ]
    if generated_at is not None:
        blocks.append(f"*Generated on: {_format_timestamp(generated_at)}*")

    for chapter in tree.chapters:
        blocks.append(f"## {plain_text(chapter.title)} (ID: {chapter.id})")
        blocks.append(_content_markdown(chapter.content, heading_offset=2))
        for topic in chapter.topics:
            blocks.append(f"### {plain_text(topic.title)} (ID: {topic.id})")
            blocks.append(_content_markdown(topic.content, heading_offset=3))
            for section in topic.sections:
                blocks.append(f"#### {plain_text(section.title)} (ID: {section.id})")
                blocks.append(_content_markdown(section.content, heading_offset=4))

    return "\n\n".join(block for block in blocks if block).strip() + "\n"


def _content_markdown(content: str, *, heading_offset: int) -> str:
    return convert_fragment_to_markdown(content, heading_offset=heading_offset) or _NO_CONTENT_MD
