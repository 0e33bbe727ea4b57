#!/usr/bin/env python3
"""
Tests for the Notion API client and the page directory.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from connectors import notion_blocks as blocks
from connectors.notion import NotionAPIError, NotionClient, PageDirectory, page_title


def response(body=None, status=200):
    resp = MagicMock()
    resp.ok = 200 <= status < 300
    resp.status_code = status
    resp.json.return_value = body if body is not None else {}
    resp.text = str(body)
    return resp


def make_client(*responses):
    session = MagicMock()
    session.headers = {}
    session.request.side_effect = list(responses)
    client = NotionClient("secret", session=session, min_request_interval=0)
    return client, session


def page(page_id, title, archived=False):
    return {
        "id": page_id,
        "archived": archived,
        "properties": {"Name": {"title": [{"plain_text": title}]}},
    }


def test_headers_are_set():
    client, session = make_client()
    assert session.headers["Authorization"] == "Bearer secret"
    assert session.headers["Notion-Version"] == "2022-06-28"
    assert session.headers["Content-Type"] == "application/json"


def test_list_all_pages_follows_cursor():
    client, session = make_client(
        response({"results": [page("a", "A")], "has_more": True, "next_cursor": "c1"}),
        response({"results": [page("b", "B")], "has_more": False}),
    )

    pages = client.list_all_pages("db")

    assert [p["id"] for p in pages] == ["a", "b"]
    second_payload = session.request.call_args_list[1].kwargs["json"]
    assert second_payload["start_cursor"] == "c1"
    assert second_payload["page_size"] == 100


def test_list_blocks_follows_cursor():
    client, session = make_client(
        response({"results": [{"id": "1"}], "has_more": True, "next_cursor": "n"}),
        response({"results": [{"id": "2"}], "has_more": False}),
    )
    assert [b["id"] for b in client.list_blocks("parent")] == ["1", "2"]
    method, url = session.request.call_args_list[0].args
    assert method == "GET"
    assert url.endswith("/blocks/parent/children")
    assert session.request.call_args_list[1].kwargs["params"]["start_cursor"] == "n"


def test_error_response_raises():
    """Non-2xx responses surface Notion's code and message."""
    client, _ = make_client(response({"code": "validation_error", "message": "bad property"}, status=400))

    with pytest.raises(NotionAPIError) as excinfo:
        client.create_page("db", {"Name": {"title": []}})

    assert excinfo.value.status == 400
    assert excinfo.value.code == "validation_error"
    assert "bad property" in str(excinfo.value)


def test_transport_error_raises():
    session = MagicMock()
    session.headers = {}
    session.request.side_effect = requests.exceptions.ConnectionError("down")
    client = NotionClient("secret", session=session, min_request_interval=0)

    with pytest.raises(NotionAPIError) as excinfo:
        client.archive_page("p1")
    assert excinfo.value.status is None
    assert excinfo.value.code == "request_failed"


def test_empty_properties_are_dropped():
    client, session = make_client(response({"id": "p1"}))
    client.update_page_properties("p1", {"Name": {"title": []}, "Status": None})

    payload = session.request.call_args.kwargs["json"]
    assert payload == {"properties": {"Name": {"title": []}}}


def test_append_blocks_chunks_by_hundred():
    children = [blocks.paragraph(f"p{i}") for i in range(150)]
    client, session = make_client(
        response({"results": [{"id": f"a{i}"} for i in range(100)]}),
        response({"results": [{"id": f"b{i}"} for i in range(50)]}),
    )

    created = client.append_blocks("parent", children)

    assert session.request.call_count == 2
    assert len(session.request.call_args_list[0].kwargs["json"]["children"]) == 100
    assert len(session.request.call_args_list[1].kwargs["json"]["children"]) == 50
    assert len(created) == 150


def test_append_returns_only_new_blocks():
    """The append response lists existing children too; only the tail is ours."""
    client, _ = make_client(response({"results": [{"id": "old"}, {"id": "new"}]}))
    assert client.append_blocks("parent", [blocks.paragraph("new")]) == [{"id": "new"}]


def test_append_nothing_is_a_noop():
    client, session = make_client()
    assert client.append_blocks("parent", []) == []
    session.request.assert_not_called()


def test_find_page_by_title_skips_archived():
    client, session = make_client(
        response({"results": [page("old", "Acme", archived=True), page("live", "Acme")]}),
    )
    assert client.find_page_by_title("db", "Acme")["id"] == "live"
    payload = session.request.call_args.kwargs["json"]
    assert payload["filter"] == {"property": "Name", "title": {"equals": "Acme"}}


def test_page_title_reads_text_content():
    created = {"properties": {"Name": {"title": [{"text": {"content": "Acme"}}]}}}
    assert page_title(created) == "Acme"
    assert page_title({}) == ""


def test_page_directory_lookups():
    """Exact titles first, then the normalized form; archived pages ignored."""
    directory = PageDirectory([
        page("1", "Acme Corp."),
        page("2", "acme corp"),
        page("3", "Beta", archived=True),
    ])

    assert directory.find("acme corp")["id"] == "2"
    assert directory.find("ACME CORP")["id"] == "1", "First page for a normalized title wins"
    assert directory.find("Beta") is None
    assert directory.find("???") is None
    assert len(directory) == 2


def test_page_directory_forget_and_remember():
    directory = PageDirectory([page("1", "Acme")])
    directory.forget("1")
    assert directory.find("Acme") is None

    directory.remember(page("2", "Acme"))
    assert directory.find("acme")["id"] == "2"
