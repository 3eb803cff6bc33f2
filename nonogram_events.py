from typing import Any, Callable, Generic, List, TypeVar

T = TypeVar("T")

Subscriber = Callable[[Any], None]


class Observable(Generic[T]):
    """A value that notifies its subscribers whenever it changes.

    Subscribers are called synchronously, in subscription order, with the new
    value. Setting an equal value is not a change. With ``identity=True`` only
    a different object counts as a change (used for values replaced wholesale,
    like the solution grid).
    """

    def __init__(self, initial: T, name: str = "", identity: bool = False) -> None:
        self.name = name
        self._initial = initial
        self._value = initial
        self._identity = identity
        self._subscribers: List[Subscriber] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> bool:
        same = value is self._value if self._identity else value == self._value
        if same:
            return False
        self._value = value
        self._notify()
        return True

    def update(self, fn: Callable[[T], T]) -> bool:
        return self.set(fn(self._value))

    def reset(self) -> bool:
        return self.set(self._initial)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback; returns a function that removes it again."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def clear_subscribers(self) -> None:
        self._subscribers.clear()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _notify(self) -> None:
        # Copy: a callback may unsubscribe itself or subscribe others.
        for callback in list(self._subscribers):
            callback(self._value)

    def __repr__(self) -> str:
        return f"Observable({self.name!r}, {self._value!r})"
