"""
Real-time change fan-out
Writers publish DocumentChange events from any thread; each subscriber receives
them on its own event loop as an async iterator.
"""

import asyncio
import threading
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional, Set


@dataclass(frozen=True)
class DocumentChange:
    collection: str
    doc_id: str
    data: Optional[Dict[str, Any]]  # None when the document was deleted


class Subscription:
    """Change stream for one document, or for a whole collection when doc_id is None"""

    def __init__(self, collection: str, doc_id: Optional[str] = None):
        self.collection = collection
        self.doc_id = doc_id
        self._loop = asyncio.get_running_loop()
        self._queue: "asyncio.Queue[DocumentChange]" = asyncio.Queue()

    def matches(self, change: DocumentChange) -> bool:
        if change.collection != self.collection:
            return False
        return self.doc_id is None or self.doc_id == change.doc_id

    def push(self, change: DocumentChange):
        self._loop.call_soon_threadsafe(self._queue.put_nowait, change)

    def __aiter__(self) -> AsyncIterator[DocumentChange]:
        return self

    async def __anext__(self) -> DocumentChange:
        return await self._queue.get()


class SubscriptionHub:
    """Registry of live subscriptions"""

    def __init__(self):
        self._subscriptions: Set[Subscription] = set()
        self._lock = threading.Lock()

    def register(self, collection: str, doc_id: Optional[str] = None) -> Subscription:
        subscription = Subscription(collection, doc_id)
        with self._lock:
            self._subscriptions.add(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription):
        with self._lock:
            self._subscriptions.discard(subscription)

    @asynccontextmanager
    async def subscribe(self, collection: str, doc_id: Optional[str] = None):
        """Scoped subscription: registered on entry, removed on exit"""
        subscription = self.register(collection, doc_id)
        try:
            yield subscription
        finally:
            self.unsubscribe(subscription)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, change: DocumentChange):
        with self._lock:
            targets = [s for s in self._subscriptions if s.matches(change)]

        for subscription in targets:
            try:
                subscription.push(change)
            except RuntimeError:
                # subscriber's event loop is closed
                self.unsubscribe(subscription)
