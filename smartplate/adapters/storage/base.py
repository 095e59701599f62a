from abc import ABC, abstractmethod


class KeyValueStorage(ABC):
    """String key -> string value store, the shape of browser localStorage."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value or None. Raises PersistenceError if unreadable."""
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...
