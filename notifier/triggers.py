"""
Trigger methods for classes that own events.

Decorating a dataclass with @event_triggers adds one method per event
field: a field `process_completed: Event` gains `on_process_completed()`,
which calls `self.process_completed.notify()`. Fields of any other type
are left alone.

This is a convenience layer on top of the engine. It does not change how
events notify.
"""

import dataclasses
import sys
import typing
from typing import Any, Callable

from notifier.engine.event import BaseEvent

TRIGGER_PREFIX = "on_"


def _is_event_type(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseEvent)


def _field_annotations(cls: type) -> dict[str, Any]:
    """
    Resolve the annotation of every dataclass field.

    Fields whose postponed annotation names something out of scope (a
    class local to a function, for instance) resolve to None and are
    treated as non-event fields.
    """
    try:
        return typing.get_type_hints(cls)
    except NameError:
        pass

    module = sys.modules.get(cls.__module__)
    globalns = vars(module) if module is not None else {}
    localns = dict(vars(cls))

    resolved: dict[str, Any] = {}
    for field in dataclasses.fields(cls):
        annotation = field.type
        if isinstance(annotation, str):
            try:
                annotation = eval(annotation, globalns, localns)
            except NameError:
                annotation = None
        resolved[field.name] = annotation
    return resolved


def _make_trigger(field_name: str) -> Callable[[Any], None]:
    def trigger(self) -> None:
        getattr(self, field_name).notify()

    trigger.__name__ = f"{TRIGGER_PREFIX}{field_name}"
    trigger.__doc__ = f"Notify the subscribers of `{field_name}`."
    return trigger


def event_triggers(cls: type) -> type:
    """
    Class decorator generating on_<field>() for every event field.

    The decorator must be applied on top of @dataclass. The generated
    method names are stored in cls.__event_triggers__.

    Raises:
        TypeError: if cls is not a dataclass, or a generated name would
                   overwrite an existing attribute
    """
    if not isinstance(cls, type) or not dataclasses.is_dataclass(cls):
        raise TypeError("@event_triggers can only be used on a dataclass")

    hints = _field_annotations(cls)
    generated: list[str] = []

    for field in dataclasses.fields(cls):
        if not _is_event_type(hints.get(field.name)):
            continue

        name = f"{TRIGGER_PREFIX}{field.name}"
        if name in cls.__dict__:
            raise TypeError(
                f"{cls.__name__}.{name} already exists; cannot generate trigger "
                f"for field '{field.name}'"
            )

        trigger = _make_trigger(field.name)
        trigger.__qualname__ = f"{cls.__qualname__}.{name}"
        setattr(cls, name, trigger)
        generated.append(name)

    cls.__event_triggers__ = tuple(generated)
    return cls
