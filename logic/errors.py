"""Error types raised by the styling core and its repository."""

from __future__ import annotations

EMPTY_WARDROBE_MESSAGE = "No wardrobe items found. Add some items to your wardrobe first."
NOT_ENOUGH_VARIETY_MESSAGE = (
    "Not enough variety in your wardrobe to build an outfit. "
    "Add a top and a bottom, or a dress, to get recommendations."
)


class LookbookError(Exception):
    """Base class for domain errors."""


class EmptyWardrobeError(LookbookError, ValueError):
    """Raised when a recommendation is requested for a wardrobe with no items."""

    def __init__(self, user_id: str | None = None) -> None:
        self.user_id = user_id
        super().__init__(EMPTY_WARDROBE_MESSAGE)


class WardrobeItemNotFoundError(LookbookError, LookupError):
    def __init__(self, user_id: str, item_id: str) -> None:
        self.user_id = user_id
        self.item_id = item_id
        super().__init__(f"Wardrobe item '{item_id}' not found")


class DuplicateWardrobeItemError(LookbookError, ValueError):
    """Raised when an add would overwrite an existing item; edits go through update."""

    def __init__(self, user_id: str, item_id: str) -> None:
        self.user_id = user_id
        self.item_id = item_id
        super().__init__(f"Wardrobe item '{item_id}' already exists")


__all__ = [
    "EMPTY_WARDROBE_MESSAGE",
    "NOT_ENOUGH_VARIETY_MESSAGE",
    "LookbookError",
    "EmptyWardrobeError",
    "DuplicateWardrobeItemError",
    "WardrobeItemNotFoundError",
]
