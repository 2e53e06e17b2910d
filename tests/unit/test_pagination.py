import logging

from bitbucket_server_client.models.bitbucket import PagedResult
from bitbucket_server_client.services.pagination import MAX_PAGES, walk_pages


class PageSource:
    def __init__(self, pages: list[PagedResult[int]]) -> None:
        self.pages = pages
        self.starts: list[int] = []

    def __call__(self, start: int) -> PagedResult[int]:
        self.starts.append(start)
        return self.pages[len(self.starts) - 1]


def test_concatenates_pages_in_arrival_order() -> None:
    source = PageSource(
        [
            PagedResult[int](values=[1, 2], isLastPage=False, nextPageStart=2),
            PagedResult[int](values=[3, 4], isLastPage=False, nextPageStart=4),
            PagedResult[int](values=[5], isLastPage=True),
        ]
    )

    assert walk_pages(source) == [1, 2, 3, 4, 5]
    assert source.starts == [0, 2, 4]


def test_empty_collection_is_single_empty_page() -> None:
    source = PageSource([PagedResult[int](values=[], isLastPage=True)])

    assert walk_pages(source) == []
    assert source.starts == [0]


def test_last_page_wins_over_next_page_start() -> None:
    source = PageSource([PagedResult[int](values=[1], isLastPage=True, nextPageStart=1)])

    assert walk_pages(source) == [1]
    assert source.starts == [0]


def test_stops_at_page_cap_without_raising(caplog) -> None:
    starts: list[int] = []

    def endless(start: int) -> PagedResult[int]:
        starts.append(start)
        return PagedResult[int](values=[start], isLastPage=False, nextPageStart=start + 1)

    with caplog.at_level(logging.WARNING):
        values = walk_pages(endless)

    assert len(starts) == MAX_PAGES
    assert values == list(range(MAX_PAGES))
    assert "truncated" in caplog.text


def test_custom_page_cap() -> None:
    starts: list[int] = []

    def endless(start: int) -> PagedResult[int]:
        starts.append(start)
        return PagedResult[int](values=[start], isLastPage=False, nextPageStart=start + 1)

    assert walk_pages(endless, max_pages=3) == [0, 1, 2]
    assert len(starts) == 3


def test_missing_next_page_start_stops_walk(caplog) -> None:
    source = PageSource(
        [
            PagedResult[int](values=[1], isLastPage=False),
            PagedResult[int](values=[2], isLastPage=True),
        ]
    )

    with caplog.at_level(logging.WARNING):
        assert walk_pages(source) == [1]
    assert source.starts == [0]
    assert "no nextPageStart" in caplog.text
