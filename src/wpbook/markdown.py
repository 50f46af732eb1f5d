"""Convert rendered WordPress post HTML to Markdown."""

from __future__ import annotations

import re

try:
    from bs4 import BeautifulSoup
    from bs4.element import Comment, NavigableString, PreformattedString, Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


_CONTAINER_TAGS = {"section", "article", "div", "span", "main", "body", "html", "header", "footer"}


def convert_fragment_to_markdown(html: str, *, heading_offset: int = 0) -> str:
    """Convert a post content fragment into Markdown.

    Parameters
    ----------
    html : str
        The ``content.rendered`` HTML of a post.
    heading_offset : int
        Added to every heading level inside the fragment so post headings nest
        below the heading of the post itself. Levels are capped at 6.
    """
    if not html or not html.strip():
        return ""
    soup = BeautifulSoup(html, "lxml")
    _strip_unwanted_elements(soup)
    blocks = _serialize_children(soup, heading_offset=heading_offset)
    return "\n\n".join(block for block in blocks if block).strip()


def _strip_unwanted_elements(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(["script", "style", "noscript", "link", "meta", "iframe", "form"]):
        tag.decompose()
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()


def _serialize_children(container: Tag, *, heading_offset: int) -> list[str]:
    blocks: list[str] = []
    loose_text: list[str] = []
    for child in container.children:
        if isinstance(child, PreformattedString):
            continue
        if isinstance(child, NavigableString):
            loose_text.append(str(child))
            continue
        if not isinstance(child, Tag):
            continue
        if child.name in {"a", "em", "i", "strong", "b", "code", "br", "sup", "sub"}:
            loose_text.append(_serialize_inline(child))
            continue
        _flush_loose_text(loose_text, blocks)
        blocks.extend(_serialize_block(child, heading_offset=heading_offset))
    _flush_loose_text(loose_text, blocks)
    return blocks


def _flush_loose_text(parts: list[str], blocks: list[str]) -> None:
    text = _cleanup_inline_text("".join(parts))
    if text:
        blocks.append(text)
    parts.clear()


def _serialize_block(tag: Tag, *, heading_offset: int) -> list[str]:
    if tag.name in _CONTAINER_TAGS:
        return _serialize_children(tag, heading_offset=heading_offset)

    if tag.name in {"h1", "h2", "h3", "h4", "h5", "h6"}:
        level = min(int(tag.name[1]) + heading_offset, 6)
        heading = _normalize_text(tag.get_text(" ", strip=True))
        if not heading:
            return []
        return [f"{'#' * level} {heading}"]

    if tag.name == "p":
        paragraph = _cleanup_inline_text(_serialize_inline(tag))
        return [paragraph] if paragraph else []

    if tag.name in {"ul", "ol"}:
        lines = _serialize_list(tag)
        return ["\n".join(lines)] if lines else []

    if tag.name == "pre":
        code = tag.get_text()
        return [f"```\n{code.strip(chr(10))}\n```"] if code.strip() else []

    if tag.name == "figure":
        figure = _serialize_figure(tag)
        return [figure] if figure else []

    if tag.name == "img":
        image = _serialize_image(tag)
        return [image] if image else []

    if tag.name == "table":
        table_md = _serialize_table(tag)
        return [table_md] if table_md else []

    if tag.name == "blockquote":
        content = _normalize_text(_serialize_inline(tag))
        if not content:
            return []
        return ["> " + content]

    if tag.name == "hr":
        return ["---"]

    if tag.name == "br":
        return []

    return _serialize_children(tag, heading_offset=heading_offset)


def _serialize_inline(node: Tag | NavigableString) -> str:
    if isinstance(node, NavigableString):
        return str(node)

    if node.name == "br":
        return "\n"

    if node.name in {"em", "i"}:
        text = _serialize_children_inline(node)
        return f"*{text}*" if text.strip() else text

    if node.name in {"strong", "b"}:
        text = _serialize_children_inline(node)
        return f"**{text}**" if text.strip() else text

    if node.name == "code":
        text = node.get_text()
        return f"`{text}`" if text else ""

    if node.name == "a":
        text = _serialize_children_inline(node).strip()
        href = node.get("href")
        if href:
            return f"[{text or href}]({href})"
        return text

    if node.name == "img":
        return _serialize_image(node)

    if node.name == "sup":
        text = _serialize_children_inline(node).strip()
        return f"^{text}" if text else ""

    return _serialize_children_inline(node)


def _serialize_children_inline(tag: Tag) -> str:
    return "".join(_serialize_inline(child) for child in tag.children)


def _cleanup_inline_text(text: str) -> str:
    text = re.sub(r"[ \t\xa0]+", " ", text)
    text = re.sub(r"\s*\n\s*", "\n", text)
    return text.strip()


def _serialize_list(list_tag: Tag, indent: int = 0) -> list[str]:
    lines: list[str] = []
    ordered = list_tag.name == "ol"
    for number, item in enumerate(list_tag.find_all("li", recursive=False), start=1):
        item_text_parts: list[str] = []
        nested_lists: list[Tag] = []
        for child in item.children:
            if isinstance(child, Tag) and child.name in {"ul", "ol"}:
                nested_lists.append(child)
            else:
                item_text_parts.append(_serialize_inline(child))
        item_text = _normalize_text("".join(item_text_parts))
        marker = f"{number}. " if ordered else "- "
        prefix = "  " * indent + marker
        lines.append(prefix + item_text if item_text else prefix.rstrip())
        for nested in nested_lists:
            lines.extend(_serialize_list(nested, indent + 1))
    return lines


def _serialize_table(table: Tag) -> str:
    rows = []
    for row in table.find_all("tr"):
        cells = row.find_all(["th", "td"], recursive=False)
        if not cells:
            continue
        values = [
            _cleanup_inline_text(_serialize_inline(cell)).replace("\n", "<br>").replace("|", "\\|")
            for cell in cells
        ]
        rows.append(values)

    if not rows:
        return ""

    max_cols = max(len(row) for row in rows)
    normalized = [row + [""] * (max_cols - len(row)) for row in rows]
    header = normalized[0]
    lines = [
        "| " + " | ".join(header) + " |",
        "| " + " | ".join("---" for _ in header) + " |",
    ]
    for row in normalized[1:]:
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines)


def _serialize_figure(figure: Tag) -> str:
    caption_tag = figure.find("figcaption")
    caption = _normalize_text(_serialize_inline(caption_tag)) if caption_tag else ""
    img = figure.find("img")
    table = figure.find("table")

    lines = []
    if img:
        lines.append(_serialize_image(img, fallback_alt=caption))
    if table:
        lines.append(_serialize_table(table))
    if caption:
        lines.append(f"*{caption}*")
    return "\n\n".join(line for line in lines if line).strip()


def _serialize_image(img: Tag, *, fallback_alt: str = "") -> str:
    src = img.get("src")
    if not src:
        return ""
    alt = _normalize_text(img.get("alt") or fallback_alt or "Image")
    return f"![{alt}]({src})"


def _normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()
