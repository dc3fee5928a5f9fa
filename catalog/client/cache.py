from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Tuple

CacheKey = Tuple[str, Hashable]


class ReadCache:
    """Cache of single-record reads keyed by ``(entity, id)``.

    Each key carries a generation that :meth:`invalidate` bumps, and
    :meth:`clear` bumps an epoch shared by every key. A load that started
    under an older generation or epoch does not store its result. ``None``
    results (record not found) are never stored.
    """

    def __init__(self) -> None:
        self._values: Dict[CacheKey, Any] = {}
        self._generations: Dict[CacheKey, int] = {}
        self._epoch = 0

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._values

    def _stamp(self, key: CacheKey) -> Tuple[int, int]:
        return self._epoch, self._generations.get(key, 0)

    def get(self, entity: str, record_id: Hashable) -> Optional[Any]:
        return self._values.get((entity, record_id))

    def set(self, entity: str, record_id: Hashable, value: Any) -> None:
        self._values[(entity, record_id)] = value

    def invalidate(self, entity: str, record_id: Hashable) -> None:
        key = (entity, record_id)
        self._values.pop(key, None)
        self._generations[key] = self._generations.get(key, 0) + 1

    def clear(self) -> None:
        self._values.clear()
        self._epoch += 1

    async def fetch(
        self,
        entity: str,
        record_id: Hashable,
        loader: Callable[[], Awaitable[Any]],
    ) -> Any:
        key = (entity, record_id)
        if key in self._values:
            return self._values[key]

        stamp = self._stamp(key)
        value = await loader()
        if value is not None and self._stamp(key) == stamp:
            self._values[key] = value
        return value
