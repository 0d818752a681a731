"""Utilities for turning parsed HTML into stable, comparable lines."""

from __future__ import annotations

from typing import Iterable

from bs4 import BeautifulSoup, Comment, Doctype, NavigableString, Tag

IGNORED_TAGS = {"script", "style", "noscript", "template"}


def semantic_lines(soup: BeautifulSoup) -> list[str]:
    """Convert the document body into whitespace-stable, semantic lines."""
    root = soup.body if soup.body is not None else soup
    lines: list[str] = []

    def walk(node, depth: int = 0) -> None:
        indent = "  " * depth

        if isinstance(node, (Comment, Doctype)):
            return

        if isinstance(node, NavigableString):
            text = " ".join(str(node).split())
            if text:
                lines.append(indent + text)
            return

        if isinstance(node, Tag):
            if node.name in IGNORED_TAGS:
                return
            attrs = " ".join(
                f'{key}="{ " ".join(value) if isinstance(value, list) else value }"'
                for key, value in sorted(node.attrs.items())
            )
            lines.append(indent + f"<{node.name}{(' ' + attrs) if attrs else ''}>")

            for child in node.children:
                walk(child, depth + 1)

            lines.append(indent + f"</{node.name}>")

    for child in root.children:
        walk(child)

    return lines


__all__: Iterable[str] = ["semantic_lines"]
