"""
Shared fixtures: sheet row builders and an in-memory Notion client.
"""

import copy
import itertools
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.form_layout import (
    FOUNDER_INTENT,
    FOUNDER_REFERRAL_INTENT,
    SEARCHER_INTENT,
    SEARCHER_REFERRAL_INTENT,
    CommonColumns,
    FounderColumns,
    FounderReferralColumns,
    SearcherColumns,
    SearcherReferralColumns,
)
from connectors.notion import NotionAPIError, page_title
from processing.models import FormRow


def make_row(cells: dict, position: int = 0) -> FormRow:
    """Build a sparse sheet row from {column: value}."""
    width = max(cells) + 1 if cells else 0
    values = [""] * width
    for index, value in cells.items():
        values[index] = value
    return FormRow(values, position=position)


def founder_row(name: str, position: int = 0, extra: dict = None) -> FormRow:
    cells = {
        CommonColumns.SUBMITTED_AT: "10/18/2025 14:03:22",
        CommonColumns.INTENT: FOUNDER_INTENT,
        FounderColumns.STARTUP_NAME: name,
    }
    cells.update(extra or {})
    return make_row(cells, position)


def founder_referral_row(target: str, referrer: str = "Rita Referrer", position: int = 0) -> FormRow:
    return make_row(
        {
            CommonColumns.SUBMITTED_AT: "10/01/2025 09:00:00",
            CommonColumns.INTENT: FOUNDER_REFERRAL_INTENT,
            FounderReferralColumns.REFERRER_NAME: referrer,
            FounderReferralColumns.STARTUP_NAME: target,
            FounderReferralColumns.QUESTIONS[0]: "Former colleague",
        },
        position,
    )


def searcher_row(name: str, position: int = 0) -> FormRow:
    return make_row(
        {
            CommonColumns.SUBMITTED_AT: "10/18/2025 14:03:22",
            CommonColumns.INTENT: SEARCHER_INTENT,
            SearcherColumns.NAME: name,
            SearcherColumns.EMAIL: "searcher@example.com",
        },
        position,
    )


def searcher_referral_row(target: str, referrer: str = "Sam Sponsor", position: int = 0) -> FormRow:
    return make_row(
        {
            CommonColumns.SUBMITTED_AT: "10/02/2025 10:30:00",
            CommonColumns.INTENT: SEARCHER_REFERRAL_INTENT,
            SearcherReferralColumns.REFERRER_NAME: referrer,
            SearcherReferralColumns.SEARCHER_NAME: target,
        },
        position,
    )


class FakeNotionClient:
    """
    In-memory stand-in for NotionClient.

    Pages and blocks live in dicts; nested children in append payloads are
    registered as real blocks so the writer can walk them again.
    """

    def __init__(self, pages=None):
        self._ids = itertools.count(1)
        self.pages: dict[str, dict] = {}
        self.blocks: dict[str, dict] = {}
        self.children: dict[str, list[str]] = {}
        self.calls: list[tuple] = []
        self.fail_titles: set[str] = set()
        for page in pages or []:
            self.pages[page["id"]] = page

    def _new_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def add_page(self, title: str, archived: bool = False) -> dict:
        page = {
            "id": self._new_id("page"),
            "archived": archived,
            "properties": {"Name": {"title": [{"plain_text": title, "text": {"content": title}}]}},
        }
        self.pages[page["id"]] = page
        return page

    # Pages

    def query_database(self, database_id, filter=None, start_cursor=None):
        self.calls.append(("query_database", database_id, filter))
        pages = [p for p in self.pages.values() if not p.get("archived")]
        if filter:
            wanted = filter["title"]["equals"]
            pages = [p for p in pages if page_title(p) == wanted]
        return {"results": copy.deepcopy(pages), "has_more": False, "next_cursor": None}

    def find_page_by_title(self, database_id, title):
        results = self.query_database(database_id, {"property": "Name", "title": {"equals": title}})["results"]
        return results[0] if results else None

    def list_all_pages(self, database_id):
        return self.query_database(database_id)["results"]

    def create_page(self, database_id, properties):
        title = page_title({"properties": properties})
        if title in self.fail_titles:
            raise NotionAPIError(400, "validation_error", f"cannot create {title}")
        self.calls.append(("create_page", title))
        page = {
            "id": self._new_id("page"),
            "archived": False,
            "properties": {k: v for k, v in properties.items() if v is not None},
        }
        self.pages[page["id"]] = page
        return copy.deepcopy(page)

    def update_page_properties(self, page_id, properties):
        title = page_title(self.pages[page_id])
        if title in self.fail_titles:
            raise NotionAPIError(400, "validation_error", f"cannot update {title}")
        self.calls.append(("update_page_properties", page_id))
        self.pages[page_id]["properties"].update({k: v for k, v in properties.items() if v is not None})
        return copy.deepcopy(self.pages[page_id])

    def archive_page(self, page_id):
        self.calls.append(("archive_page", page_id))
        self.pages[page_id]["archived"] = True
        return copy.deepcopy(self.pages[page_id])

    # Blocks

    def _register(self, parent_id, payload):
        block = copy.deepcopy(payload)
        block["id"] = self._new_id("block")
        block["archived"] = False
        body = block.get(block["type"], {})
        nested = body.pop("children", None) or []
        self.blocks[block["id"]] = block
        self.children.setdefault(parent_id, []).append(block["id"])
        for child in nested:
            self._register(block["id"], child)
        return block

    def append_blocks(self, parent_id, children):
        children = [c for c in children or [] if c]
        if not children:
            return []
        self.calls.append(("append_blocks", parent_id, len(children)))
        return [copy.deepcopy(self._register(parent_id, child)) for child in children]

    def list_blocks(self, parent_id):
        ids = self.children.get(parent_id, [])
        return [copy.deepcopy(self.blocks[i]) for i in ids if not self.blocks[i]["archived"]]

    def update_block(self, block_id, payload):
        self.calls.append(("update_block", block_id))
        block = self.blocks[block_id]
        for key, value in payload.items():
            if isinstance(value, dict) and isinstance(block.get(key), dict):
                block[key].update(copy.deepcopy(value))
            else:
                block[key] = copy.deepcopy(value)
        return copy.deepcopy(block)

    def archive_block(self, block_id):
        self.calls.append(("archive_block", block_id))
        self.blocks[block_id]["archived"] = True
        return copy.deepcopy(self.blocks[block_id])

    # Helpers for assertions

    def live_pages(self) -> list[dict]:
        return [p for p in self.pages.values() if not p.get("archived")]

    def titles(self) -> list[str]:
        return [page_title(p) for p in self.live_pages()]

    def toggle_titles(self, parent_id) -> list[str]:
        from connectors.notion_blocks import block_text

        return [block_text(b) for b in self.list_blocks(parent_id) if b["type"] == "toggle"]

    def child_toggle(self, parent_id, title) -> dict:
        from connectors.notion_blocks import block_text

        for block in self.list_blocks(parent_id):
            if block["type"] == "toggle" and block_text(block) == title:
                return block
        raise AssertionError(f"No toggle {title!r} under {parent_id}")


@pytest.fixture
def notion():
    return FakeNotionClient()
