import pytest

from patternkit.observer import ObserverError, Publisher, observer, publisher_of


@observer(publisher_name="ItemPublisher")
class ItemObserver:
    def get_code(self):
        raise ObserverError("abstract")


class Item(ItemObserver):
    def __init__(self, code, log):
        self.code = code
        self.log = log

    def get_code(self):
        return self.code

    def event(self):
        self.log.append(self.code)


def test_publisher_name_is_used():
    assert publisher_of(ItemObserver).__name__ == "ItemPublisher"


def test_default_publisher_name():
    @observer
    class FooObserver:
        pass

    assert publisher_of(FooObserver).__name__ == "FooObserverPublisher"


def test_notify_all_then_without_last():
    log = []
    publisher = publisher_of(ItemObserver)()
    items = [Item(code, log) for code in range(10)]
    for item in items:
        publisher.subscribe(item)
    assert len(publisher) == 10
    publisher.notify()
    assert log == list(range(10))

    log.clear()
    publisher.unsubscribe(items[-1])
    assert len(publisher) == 9
    assert list(publisher) == items[:-1]
    publisher.notify()
    assert log == list(range(9))


def test_len_and_iter_follow_subscription_order():
    log = []
    publisher = publisher_of(ItemObserver)()
    items = [Item(code, log) for code in range(3)]
    for item in items:
        publisher.subscribe(item)
    assert len(publisher) == 3
    assert list(publisher) == items


def test_unsubscribe_removes_every_occurrence():
    log = []
    publisher = publisher_of(ItemObserver)()
    item = Item(1, log)
    other = Item(2, log)
    publisher.subscribe(item)
    publisher.subscribe(other)
    publisher.subscribe(item)
    publisher.unsubscribe(item)
    assert list(publisher) == [other]


def test_unsubscribe_uses_identity_not_equality():
    log = []
    publisher = publisher_of(ItemObserver)()
    first = Item(5, log)
    twin = Item(5, log)
    publisher.subscribe(first)
    publisher.subscribe(twin)
    publisher.unsubscribe(first)
    assert list(publisher) == [twin]


def test_unsubscribe_absent_is_noop():
    log = []
    publisher = publisher_of(ItemObserver)()
    item = Item(1, log)
    publisher.subscribe(item)
    publisher.unsubscribe(Item(2, log))
    assert list(publisher) == [item]


def test_typed_publisher_rejects_other_types():
    class Stranger:
        def event(self):
            pass

    publisher = publisher_of(ItemObserver)()
    with pytest.raises(ObserverError):
        publisher.subscribe(Stranger())
    assert len(publisher) == 0


def test_observer_without_event_rejected():
    @observer
    class Quiet:
        pass

    publisher = publisher_of(Quiet)()
    with pytest.raises(ObserverError, match="event"):
        publisher.subscribe(Quiet())


def test_plain_publisher_accepts_any_object_with_event():
    calls = []

    class Listener:
        def event(self):
            calls.append(self)

    publisher = Publisher()
    listener = Listener()
    publisher.subscribe(listener)
    publisher.notify()
    publisher.notify()
    assert calls == [listener, listener]


def test_publishers_are_independent():
    log = []
    cls = publisher_of(ItemObserver)
    a, b = cls(), cls()
    a.subscribe(Item(1, log))
    assert (len(a), len(b)) == (1, 0)


def test_unsubscribe_during_notify_does_not_skip():
    log = []
    publisher = Publisher()

    class Leaver:
        def __init__(self, name):
            self.name = name

        def event(self):
            log.append(self.name)
            publisher.unsubscribe(self)

    first, second = Leaver("a"), Leaver("b")
    publisher.subscribe(first)
    publisher.subscribe(second)
    publisher.notify()
    assert log == ["a", "b"]
    assert len(publisher) == 0


def test_publisher_of_undecorated_raises():
    class Plain:
        pass

    with pytest.raises(ObserverError):
        publisher_of(Plain)


def test_invalid_publisher_name_raises():
    with pytest.raises(ObserverError, match="publisher_name"):
        observer(publisher_name="not a name")
    with pytest.raises(ObserverError):
        observer(publisher_name=3)


def test_observer_requires_class():
    with pytest.raises(ObserverError):
        observer(len)


def test_publisher_is_subclass_of_publisher():
    cls = publisher_of(ItemObserver)
    assert issubclass(cls, Publisher)
    assert cls.observer_type is ItemObserver