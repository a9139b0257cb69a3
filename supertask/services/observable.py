from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")

Listener = Callable[[T], None]


class Observable(Generic[T]):
    """Change channel a store publishes its snapshots on.

    Subscribers are called synchronously, in registration order, with the new
    snapshot. ``subscribe`` returns a callable that removes the subscription.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener[T]] = []

    def subscribe(self, listener: Listener[T]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, snapshot: T) -> None:
        for listener in list(self._listeners):
            listener(snapshot)
