from __future__ import annotations

from typing import Iterator, List

from backend.app.models import CHECK_ITEM_KEYS, CheckItem, CheckItemKey, CheckStatus


def default_items() -> tuple[CheckItem, ...]:
    return tuple(CheckItem(key, CheckStatus.OK) for key in CHECK_ITEM_KEYS)


class ChecklistState:
    """The five fixed checklist entries; only ever their statuses change."""

    def __init__(self) -> None:
        self._items: tuple[CheckItem, ...] = ()
        self.initialize()

    def initialize(self) -> None:
        self._items = default_items()

    def set_status(self, key: CheckItemKey, status: CheckStatus) -> None:
        self._items = tuple(
            CheckItem(item.key, status) if item.key == key else item for item in self._items
        )

    @property
    def items(self) -> tuple[CheckItem, ...]:
        return self._items

    def status_of(self, key: CheckItemKey) -> CheckStatus:
        for item in self._items:
            if item.key == key:
                return item.status
        raise KeyError(key)

    def failed_keys(self) -> List[CheckItemKey]:
        return [item.key for item in self._items if item.status is CheckStatus.FAIL]

    def __iter__(self) -> Iterator[CheckItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
