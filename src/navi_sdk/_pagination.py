"""Pagination utilities for Navi SDK."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


@dataclass(frozen=True)
class Page(Generic[T]):
    """Items of one page plus whether the server has more."""

    items: list[T]
    has_more: bool


# Type alias for fetch functions: (offset, limit) -> Page
FetchFn = Callable[[int, int], Page[T]]


class PageIterator(Generic[T]):
    """Lazy offset-based iterator that fetches pages on demand.

    Example usage:
        # Iterate through every message of a conversation
        for message in client.conversations.iter_messages(conversation_id):
            print(f"{message.role}: {message.content}")

        # Get just the first page
        first_page = client.conversations.iter_messages(conversation_id).first_page()

        # Get the first 10 messages
        messages = client.conversations.iter_messages(conversation_id).take(10)
    """

    def __init__(
        self,
        fetch_fn: FetchFn[T],
        page_size: int = 50,
    ) -> None:
        """Initialize the page iterator.

        Args:
            fetch_fn: Function that takes (offset, limit) and returns a Page
            page_size: Number of items per page (default 50)
        """
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._fetch_fn = fetch_fn
        self._page_size = page_size
        self._reset()

    def _reset(self) -> None:
        """Reset iterator state for fresh iteration."""
        self._buffer: list[T] = []
        self._offset = 0
        self._exhausted = False

    def _fetch_next_page(self) -> list[T]:
        """Fetch the page at the current offset and advance past it."""
        page = self._fetch_fn(self._offset, self._page_size)
        self._offset += len(page.items)

        # An empty page means the server ran out even if it claims otherwise
        if not page.has_more or not page.items:
            self._exhausted = True

        return page.items

    def __iter__(self) -> Iterator[T]:
        """Return iterator (resets state for fresh iteration)."""
        self._reset()
        return self

    def __next__(self) -> T:
        """Return next item, fetching pages as needed."""
        while not self._buffer:
            if self._exhausted:
                raise StopIteration
            self._buffer = self._fetch_next_page()

        return self._buffer.pop(0)

    def first_page(self) -> list[T]:
        """Get just the first page of results."""
        return self._fetch_fn(0, self._page_size).items

    def all(self) -> list[T]:
        """Fetch all pages and return as a single list.

        Warning: This loads all items into memory.
        """
        return list(self)

    def take(self, n: int) -> list[T]:
        """Get the first n items (may span multiple pages).

        Args:
            n: Maximum number of items to return

        Returns:
            List of up to n items
        """
        result: list[T] = []
        if n <= 0:
            return result
        for item in self:
            result.append(item)
            if len(result) >= n:
                break
        return result
