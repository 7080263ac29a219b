# patternkit

Small helpers for two common design patterns:

- **Builder** (`patternkit.builder`): the `builder` decorator adds a `builder()` class method to a dataclass. That method returns an instance of a generated builder class.
- **Observer** (`patternkit.observer`): the `observer` decorator marks a class as an observer type and generates a matching `Publisher` subclass for it.

The package has no dependencies outside the standard library.

## Installation

```
pip install patternkit
```

## Builder

Apply `builder` to a dataclass. Put it above `@dataclass` so that it runs after the dataclass is created.

The generated builder gets one setter method for each field it includes. Fields that the builder leaves out must be passed to `build()`, either positionally in declaration order or by their method names.

```python
from dataclasses import dataclass
from typing import Callable

from patternkit.builder import builder, builder_field

@builder(name="CommandCreator", opt_in=True)
@dataclass
class Command:
    definition: str = builder_field(name="value", include=True)
    arg_count: int = builder_field(include=True)
    accepted_flag_fallback: Callable[[int], int] = builder_field()
    childs: list = builder_field()

command = (
    Command.builder()
    .value("my-command")
    .arg_count(3)
    .build(lambda val: val + 5, [])
)

assert command.definition == "my-command"
assert command.arg_count == 3
assert command.accepted_flag_fallback(67) == 72
assert command.childs == []
```

### `builder(cls=None, *, name=None, build_by=BuildBy.VALUE, opt_in=False)`

You can use it bare, as `@builder`, or called with options, as `@builder(...)`.

- `name`: the name of the generated builder class. Defaults to `<Class>Builder`.
- `build_by`: either `"value"` / `BuildBy.VALUE` or `"reference"` / `BuildBy.REFERENCE`.
  - With `"value"`, each setter returns a new builder and leaves the original unchanged.
  - With `"reference"`, each setter changes the builder in place and returns that same builder.
- `opt_in`: when true, a field is included only if it is marked `include=True`.

### `builder_field(*, name=None, include=None, **kwargs)`

Use `builder_field(...)` in place of `dataclasses.field(...)`. Any other keyword arguments, such as `default`, `default_factory`, `init` and `metadata`, are passed on to `dataclasses.field`.

- `name`: renames the setter method for the field.
- `include`: `True` or `False` puts the field in the builder or leaves it out, whatever `opt_in` says.

### Starting values of included fields

A new builder starts each included field from the first of these that applies:

1. the field's `default`;
2. the field's `default_factory`;
3. a value derived from its type annotation:
   - an empty value for `int`, `float`, `complex`, `bool`, `str`, `bytes`, `bytearray`, `list`, `dict`, `set`, `frozenset` and `tuple`, including their generic forms;
   - `None` for optional types;
   - a fresh instance for a dataclass whose init fields all have defaults.

If an included field has none of these, decorating the class raises `BuilderError`.

### Behaviour of `build()`

`build()` deep-copies the builder's values, so several objects built from one builder do not share state. Fields declared with `init=False` are set after the object is constructed.

Builders compare equal when they have the same values. Their `repr` lists those values.

### Errors

`BuilderError`, a subclass of `TypeError`, is raised when:

- the decorated class is not a dataclass, or has no fields;
- `build_by` has an unknown value;
- a name is not a valid identifier;
- two fields map to the same method name;
- a method name is one of `build`, `self` or `_values`.

## Observer

```python
from patternkit.observer import observer, publisher_of

@observer(publisher_name="ItemPublisher")
class ItemObserver:
    def event(self):
        raise NotImplementedError

class Item(ItemObserver):
    def __init__(self, code):
        self.code = code
        self.seen = 0

    def event(self):
        self.seen += 1

ItemPublisher = publisher_of(ItemObserver)
publisher = ItemPublisher()
items = [Item(i) for i in range(10)]
for item in items:
    publisher.subscribe(item)

publisher.notify()
publisher.unsubscribe(items[-1])
publisher.notify()

assert len(publisher) == 9
assert items[0].seen == 2
assert items[-1].seen == 1
```

### `observer(cls=None, *, publisher_name=None)` and `publisher_of(cls)`

`observer` creates a subclass of `Publisher` named `publisher_name`, or `<Class>Publisher` if no name is given, and attaches it to the class. `publisher_of(cls)` returns that publisher class.

### `Publisher` methods

- `subscribe(observer)`: adds an observer to the end of the list. The observer must be an instance of the publisher's observer type and must have a callable `event` method.
- `unsubscribe(observer)`: removes every subscription of that exact object, compared by identity. An object that is not subscribed is ignored.
- `notify()`: calls `event()` on every observer in subscription order. It works on a snapshot of the list taken when it starts.
- `len(publisher)`: the number of subscriptions.
- `iter(publisher)`: iterates over a snapshot of the subscriptions.

A plain `Publisher()` accepts any object that has an `event` method.

### Errors

`ObserverError`, a subclass of `TypeError`, is raised for:

- an invalid `publisher_name`;
- decorating something that is not a class;
- subscribing an object of the wrong type, or one without an `event` method;
- calling `publisher_of` on a class that was not decorated with `observer`.

## Running the tests

```
pip install -e .[test]
pytest
```