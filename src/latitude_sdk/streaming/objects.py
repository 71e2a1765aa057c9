"""Bridges provider ``text-delta`` events to an ``IncrementalJsonParser``."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from latitude_sdk._callbacks import call_user_callback
from latitude_sdk.models.events import StreamEvent, TextDelta
from latitude_sdk.streaming.partial_json import IncrementalJsonParser


class JsonObjectListener:
    """An ``on_event`` callback that emits JSON objects as the model writes them.

    Feeds every ``text-delta`` payload into an ``IncrementalJsonParser`` and
    passes each completed object to ``on_object``.  Other events are handed
    to ``on_other`` when given.

    Usage::

        listener = JsonObjectListener(on_object=lambda obj: print(obj["name"]))
        await client.prompts.run("list-users", on_event=listener)

    Parameters:
        on_object: Called with each decoded object; may be async.
        on_other: Optional callback for every non text-delta event.
        parser: Parser to feed; a fresh one is created when omitted.
    """

    __slots__ = ("_on_object", "_on_other", "_parser", "objects")

    def __init__(
        self,
        on_object: Callable[[Any], Any],
        on_other: Callable[[StreamEvent], Any] | None = None,
        parser: IncrementalJsonParser | None = None,
    ) -> None:
        self._on_object = on_object
        self._on_other = on_other
        self._parser = parser or IncrementalJsonParser()
        self.objects: list[Any] = []

    @property
    def parser(self) -> IncrementalJsonParser:
        return self._parser

    async def __call__(self, event: StreamEvent) -> None:
        if not isinstance(event.data, TextDelta):
            await call_user_callback(self._on_other, event)
            return
        for obj in self._parser.feed(event.data.text_delta):
            self.objects.append(obj)
            await call_user_callback(self._on_object, obj)
