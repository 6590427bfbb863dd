"""Slugs, read time, pagination and image decoding."""

from __future__ import annotations

import base64

import pytest

from inkwell import settings
from inkwell.deps import PageParams
from inkwell.errors import BadRequestError
from inkwell.image_store import decode_image, delete_image
from inkwell.pagination import build_pagination
from inkwell.utils.read_time import calculate_read_time, extract_text
from inkwell.utils.slugs import post_slug, slugify


def _doc(*blocks):
    return {"time": 1, "blocks": list(blocks), "version": "2.28.0"}


def test_slugify():
    assert slugify("  Hello, World! ") == "hello-world"
    assert slugify("Ünïcode & more") == "n-code-more"
    assert slugify("***") == ""


def test_post_slug_is_unique_per_call():
    first, second = post_slug("Same Title"), post_slug("Same Title")

    assert first.startswith("same-title-")
    assert len(first) == len("same-title-") + 8
    assert first != second
    assert post_slug("!!!").startswith("post-")


def test_extract_text_covers_lists_and_strips_markup():
    content = _doc(
        {"type": "paragraph", "data": {"text": "One <b>two</b>"}},
        {"type": "list", "data": {"style": "unordered", "items": ["three", {"content": "four", "items": ["five"]}]}},
        {"type": "image", "data": {"file": {"url": "/x.png"}, "caption": "ignored"}},
    )

    assert extract_text(content).split() == ["One", "two", "three", "four", "five"]


def test_read_time_rounds_up_with_a_floor_of_one():
    assert calculate_read_time(None) == 1
    assert calculate_read_time(_doc({"type": "paragraph", "data": {"text": "word " * 225}})) == 1
    assert calculate_read_time(_doc({"type": "paragraph", "data": {"text": "word " * 226}})) == 2


def test_pagination_block():
    assert build_pagination(0, PageParams(page=1, limit=20)).total_pages == 0
    assert build_pagination(41, PageParams(page=3, limit=20)).total_pages == 3


def test_decode_image_checks_signature_and_size(monkeypatch):
    jpeg = base64.b64encode(b"\xff\xd8\xff" + b"\x00" * 16).decode()

    content, mime_type = decode_image(f"data:image/jpeg;base64,{jpeg}")
    assert mime_type == "image/jpeg"
    assert content.startswith(b"\xff\xd8\xff")

    with pytest.raises(BadRequestError):
        decode_image("data:image/gif;base64,R0lGODlh")
    with pytest.raises(BadRequestError):
        decode_image("not base64 at all!")

    monkeypatch.setattr(settings, "IMAGE_MAX_BYTES", 4)
    with pytest.raises(BadRequestError):
        decode_image(jpeg)


def test_delete_image_refuses_paths_outside_the_vault():
    assert delete_image("../../etc/passwd") is False
    assert delete_image(None) is False
