"""
Event chain execution engine.

Provides workflow orchestration on top of EventBus, processing events
recursively until termination conditions are met.
"""

import asyncio
from typing import AsyncGenerator, Set

from .events import BaseEvent, BreakEvent, EventBus, Dependencies


class EventChain:
    """Executes event-driven workflows by chaining event handler results.

    Events are produced by a background task and yielded as they appear.
    A consumer may stop iterating early; the remaining handlers keep running
    in the background. An exception raised by a handler is re-raised to the
    consumer once the events produced before it have been yielded.
    """

    _background: Set[asyncio.Task] = set()

    def __init__(
        self,
        event_bus: EventBus,
        deps: Dependencies,
    ) -> None:
        """
        Initialize event chain executor.

        Args:
            event_bus: The event bus to dispatch events through.
            deps: Dependencies container to pass to handlers.
        """
        self.event_bus = event_bus
        self.deps = deps

    async def execute(self, initial_event: BaseEvent) -> AsyncGenerator[BaseEvent, None]:
        """
        Execute event chain starting from initial event.

        Yields:
            Events encountered during chain execution, depth first.

        Raises:
            Exception: Whatever a handler or hook raised.
        """
        events_queue: asyncio.Queue = asyncio.Queue()

        async def producer():
            try:
                async for event in self._process_event(initial_event):
                    await events_queue.put(event)
            except Exception as e:
                await events_queue.put(e)
            finally:
                await events_queue.put(None)  # Sentinel to indicate completion

        task = asyncio.create_task(producer())
        self._background.add(task)
        task.add_done_callback(self._background.discard)

        while True:
            item = await events_queue.get()
            if item is None:  # Chain complete
                break
            if isinstance(item, Exception):
                raise item
            yield item

    async def _process_event(self, event: BaseEvent) -> AsyncGenerator[BaseEvent, None]:
        """
        Process single event and recursively handle results.

        Args:
            event: The event to process.

        Yields:
            Events from the chain.
        """
        if isinstance(event, BreakEvent):
            return

        async for result in self.event_bus.dispatch(event, self.deps):
            if result is None:
                continue
            if isinstance(result, BaseEvent):
                yield result
                async for e in self._process_event(result):
                    yield e
            else:
                raise TypeError(f"Handler returned unsupported type: {type(result).__name__}")
