"""Publishers that notify subscribed observers."""

from __future__ import annotations

import keyword
from typing import Any, Iterator

_PUBLISHER_ATTR = "__publisher__"


class ObserverError(TypeError):
    """Raised on misuse of observers and publishers."""


class Publisher:
    """Keeps a list of observers and calls ``event()`` on each on notify."""

    observer_type: type | None = None

    def __init__(self):
        self._observers: list[Any] = []

    def subscribe(self, observer):
        """Add an observer to the end of the list."""
        expected = self.observer_type
        if expected is not None and not isinstance(observer, expected):
            raise ObserverError(
                f"{type(self).__name__} accepts only instances of {expected.__name__}"
            )
        if not callable(getattr(observer, "event", None)):
            raise ObserverError(f"{type(observer).__name__} has no callable `event` method")
        self._observers.append(observer)

    def unsubscribe(self, observer):
        """Remove every subscription of this very object; absent ones are ignored."""
        self._observers = [o for o in self._observers if o is not observer]

    def notify(self):
        """Call ``event()`` on every observer, in subscription order."""
        for observer in tuple(self._observers):
            observer.event()

    def __len__(self):
        return len(self._observers)

    def __iter__(self) -> Iterator[Any]:
        return iter(tuple(self._observers))


def _check_name(name: object) -> None:
    if not (isinstance(name, str) and name.isidentifier() and not keyword.iskeyword(name)):
        raise ObserverError(f"Expected an identifier string for 'publisher_name', got {name!r}")


def observer(cls=None, *, publisher_name=None):
    """Mark a class as an observer type and generate its publisher class.

    The publisher is named ``publisher_name`` or ``<Class>Publisher`` and is
    returned by :func:`publisher_of`.
    """
    if publisher_name is not None:
        _check_name(publisher_name)

    def decorate(target):
        if not isinstance(target, type):
            raise ObserverError("`observer` can only decorate classes.")
        name = publisher_name or f"{target.__name__}Publisher"
        publisher = type(
            name,
            (Publisher,),
            {
                "observer_type": target,
                "__module__": target.__module__,
                "__qualname__": name,
                "__doc__": f"Publisher of instances of `{target.__name__}`.",
            },
        )
        setattr(target, _PUBLISHER_ATTR, publisher)
        return target

    return decorate if cls is None else decorate(cls)


def publisher_of(cls):
    """Return the publisher class generated for an observer class."""
    publisher = getattr(cls, _PUBLISHER_ATTR, None)
    if not (isinstance(publisher, type) and issubclass(publisher, Publisher)):
        raise ObserverError(f"{getattr(cls, '__name__', cls)!r} is not an observer class")
    return publisher