"""
Tests for result windowing and previous/next link construction.
"""
from urllib.parse import parse_qs, urlsplit

from tvcatalog.services.cursor import CursorDirection, decode_cursor
from tvcatalog.services.links import PageLinks, build_page_links, build_page_url
from tvcatalog.services.ordering import OrderKey, OrderSpec
from tvcatalog.services.pagination import PageRequest, PageResult, apply_pagination_result

ID_SPEC = OrderSpec.of(OrderKey("id", "i.id"))
URL = "http://testserver/api/v1/items?start=2024-01-01T00:00:00Z&limit=2"


def _rows(*ids):
    return [{"id": i} for i in ids]


def _cursor(direction, limit=2):
    return PageRequest(
        limit=limit,
        cursor_values={"id": 0},
        cursor_direction=direction,
        using_page_info=True,
    )


def _query(url):
    return parse_qs(urlsplit(url).query)


class TestApplyPaginationResult:
    """Test window extraction from over-fetched rows."""

    def test_unbounded(self):
        result = apply_pagination_result(_rows(1, 2, 3), PageRequest())
        assert result.items == _rows(1, 2, 3)
        assert result.has_previous is False
        assert result.has_next is False

    def test_first_page_with_more(self):
        """limit+1 rows means the lookahead row is dropped and a next page exists."""
        result = apply_pagination_result(_rows(1, 2, 3), PageRequest(limit=2))
        assert result.items == _rows(1, 2)
        assert result.has_previous is False
        assert result.has_next is True

    def test_first_page_exact(self):
        result = apply_pagination_result(_rows(1, 2), PageRequest(limit=2))
        assert result.items == _rows(1, 2)
        assert result.has_next is False

    def test_offset_page(self):
        result = apply_pagination_result(_rows(5, 6), PageRequest(limit=2, offset=4))
        assert result.items == _rows(5, 6)
        assert result.has_previous is True
        assert result.has_next is False

    def test_forward_cursor(self):
        result = apply_pagination_result(_rows(3, 4, 5), _cursor(CursorDirection.NEXT))
        assert result.items == _rows(3, 4)
        assert result.has_previous is True
        assert result.has_next is True

    def test_forward_cursor_last_page(self):
        result = apply_pagination_result(_rows(5), _cursor(CursorDirection.NEXT))
        assert result.items == _rows(5)
        assert result.has_previous is True
        assert result.has_next is False

    def test_backward_cursor_reverses(self):
        """Rows fetched in flipped order come back in presentation order."""
        result = apply_pagination_result(_rows(4, 3, 2), _cursor(CursorDirection.PREV))
        assert result.items == _rows(3, 4)
        assert result.has_previous is True
        assert result.has_next is True

    def test_backward_cursor_reaches_start(self):
        result = apply_pagination_result(_rows(2, 1), _cursor(CursorDirection.PREV))
        assert result.items == _rows(1, 2)
        assert result.has_previous is False
        assert result.has_next is True

    def test_empty(self):
        result = apply_pagination_result([], _cursor(CursorDirection.NEXT))
        assert result.items == []

    def test_window_never_exceeds_limit(self):
        for limit in range(1, 6):
            result = apply_pagination_result(_rows(*range(10)), PageRequest(limit=limit))
            assert len(result.items) == limit


class TestPageLinks:
    """Test Link header formatting."""

    def test_both(self):
        links = PageLinks(previous="http://x/a?p=1", next="http://x/a?p=2")
        assert links.header() == '<http://x/a?p=1>; rel="previous", <http://x/a?p=2>; rel="next"'

    def test_next_only(self):
        assert PageLinks(next="http://x/a").header() == '<http://x/a>; rel="next"'

    def test_none(self):
        assert PageLinks().header() is None


class TestBuildPageLinks:
    """Test link derivation from a window."""

    def test_build_page_url_replaces_pagination_params(self):
        url = build_page_url("http://testserver/items?limit=9&offset=4&page_info=old&start=x", 2, "tok")
        query = _query(url)
        assert query == {"start": ["x"], "limit": ["2"], "page_info": ["tok"]}
        assert url.startswith("http://testserver/items?")

    def test_anchors_on_first_and_last_item(self):
        result = PageResult(items=_rows(3, 4), has_previous=True, has_next=True)
        links = build_page_links(URL, result, ID_SPEC, 2)

        prev_token = _query(links.previous)["page_info"][0]
        next_token = _query(links.next)["page_info"][0]
        assert decode_cursor(prev_token) == {"v": 1, "dir": "prev", "values": {"id": 3}, "limit": 2}
        assert decode_cursor(next_token) == {"v": 1, "dir": "next", "values": {"id": 4}, "limit": 2}

    def test_filters_preserved(self):
        result = PageResult(items=_rows(1, 2), has_previous=False, has_next=True)
        links = build_page_links(URL, result, ID_SPEC, 2)
        query = _query(links.next)
        assert query["start"] == ["2024-01-01T00:00:00Z"]
        assert query["limit"] == ["2"]
        assert "offset" not in query

    def test_offset_page_links_use_cursors(self):
        """Links from an offset page continue in cursor mode."""
        url = "http://testserver/api/v1/items?limit=2&offset=2"
        result = PageResult(items=_rows(3, 4), has_previous=True, has_next=True)
        links = build_page_links(url, result, ID_SPEC, 2)
        assert "offset" not in _query(links.previous)
        assert "offset" not in _query(links.next)
        assert "page_info" in _query(links.previous)

    def test_flags_control_links(self):
        result = PageResult(items=_rows(1, 2), has_previous=False, has_next=False)
        assert build_page_links(URL, result, ID_SPEC, 2) == PageLinks()

    def test_empty_window_has_no_links(self):
        result = PageResult(items=[], has_previous=True, has_next=True)
        assert build_page_links(URL, result, ID_SPEC, 2) == PageLinks()

    def test_unbounded_has_no_links(self):
        result = PageResult(items=_rows(1, 2), has_previous=True, has_next=True)
        assert build_page_links(URL, result, ID_SPEC, None) == PageLinks()
