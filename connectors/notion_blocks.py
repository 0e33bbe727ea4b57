"""
Notion block payload builders.

Plain dict builders for the block types the page writer uses, plus helpers
to read a block's title text back.
"""

from typing import Optional

# Notion rejects rich text content longer than this
MAX_TEXT_LENGTH = 2000


def rich_text(content: str, bold: bool = False) -> list[dict]:
    content = str(content or "")[:MAX_TEXT_LENGTH]
    item = {"type": "text", "text": {"content": content}}
    if bold:
        item["annotations"] = {"bold": True}
    return [item]


def paragraph(content: str) -> dict:
    return {"object": "block", "type": "paragraph", "paragraph": {"rich_text": rich_text(content)}}


def quote(content: str) -> dict:
    return {"object": "block", "type": "quote", "quote": {"rich_text": rich_text(content)}}


def toggle(title: str, children: Optional[list[dict]] = None, bold: bool = False) -> dict:
    block = {"object": "block", "type": "toggle", "toggle": {"rich_text": rich_text(title, bold=bold)}}
    if children:
        block["toggle"]["children"] = children
    return block


def table_row(cells: list[str]) -> dict:
    return {
        "object": "block",
        "type": "table_row",
        "table_row": {"cells": [rich_text(cell) for cell in cells]},
    }


def table(rows: list[list[str]], has_column_header: bool = False) -> dict:
    """Simple table; width is taken from the first row."""
    width = len(rows[0]) if rows else 2
    return {
        "object": "block",
        "type": "table",
        "table": {
            "table_width": width,
            "has_column_header": has_column_header,
            "has_row_header": False,
            "children": [table_row(cells) for cells in rows],
        },
    }


def block_text(block: dict) -> str:
    """Plain text of a text-bearing block (toggle, quote, paragraph...)."""
    body = block.get(block.get("type", ""), {}) or {}
    parts = []
    for item in body.get("rich_text") or []:
        text = item.get("plain_text")
        if text is None:
            text = item.get("text", {}).get("content", "")
        parts.append(text)
    return "".join(parts)


def is_toggle(block: dict, title: Optional[str] = None) -> bool:
    if block.get("type") != "toggle" or block.get("archived"):
        return False
    return title is None or block_text(block) == title


def table_row_cells(block: dict) -> list[str]:
    """Plain text of each cell of a table_row block."""
    cells = block.get("table_row", {}).get("cells") or []
    values = []
    for cell in cells:
        values.append("".join(item.get("plain_text", item.get("text", {}).get("content", "")) for item in cell))
    return values
