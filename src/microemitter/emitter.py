"""
Event emitter implementation.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
import types
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Set

from .config import EmitterConfig
from .diagnostics import DiagnosticSink
from .errors import InvalidArgument

logger = logging.getLogger(__name__)

HandlerFunc = Callable[..., Any]

# repeat values accepted by EventEmitter.on()
UNLIMITED = 0
ONCE = 1


@dataclass(eq=False)
class _Listener:
    handler: HandlerFunc
    original: HandlerFunc
    context: Any
    weight: int
    # None: unlimited, >0: calls left, 0: exhausted
    remaining: Optional[int]

    @property
    def exhausted(self) -> bool:
        return self.remaining == 0

    def matches(self, handler: HandlerFunc, context: Any) -> bool:
        return self.original == handler and self.context is context

    def consume(self) -> bool:
        """
        Count one call against the repeat budget.
        Returns True when this call exhausted the listener.
        """
        if self.remaining is None:
            return False
        self.remaining -= 1
        return self.remaining == 0


def _check_event(event: Any) -> None:
    if not isinstance(event, str) or not event.strip():
        raise InvalidArgument("Event name must be a non-empty string")


def _check_callable(handler: Any) -> None:
    if not callable(handler):
        raise InvalidArgument(f"{handler!r} is not callable")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class EventEmitter:
    """
    Weighted publish/subscribe dispatcher with sync and async emission.

    Listeners run in descending weight order (insertion order for ties),
    followed by the wildcard listeners registered with `on_any()`.
    A failing listener is reported to the diagnostic sink and never stops
    delivery to the others.
    """

    def __init__(
        self,
        max_listeners: Optional[int] = None,
        sink: Optional[DiagnosticSink] = None,
        *,
        config: Optional[EmitterConfig] = None,
    ) -> None:
        """
        Initialize a new EventEmitter instance.

        Args:
            max_listeners (Optional[int], optional): Cap on listeners per event.
                                                     Defaults to None (unlimited).
            sink (Optional[DiagnosticSink], optional): Diagnostic sink.
                                                       Defaults to a LoggingSink.
            config (Optional[EmitterConfig], optional): Full configuration.
                                                        Overrides the other arguments.
        """
        if config is None:
            if sink is None:
                config = EmitterConfig(max_listeners=max_listeners)
            else:
                config = EmitterConfig(max_listeners=max_listeners, sink=sink)
        self._config = config
        self._lock = threading.RLock()
        self._events: Dict[str, List[_Listener]] = {}
        self._any: List[HandlerFunc] = []
        # strong refs to tasks spawned by emit() for awaitable results
        self._pending: Set["asyncio.Future[Any]"] = set()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(events={len(self._events)}, "
            f"any={len(self._any)}, max_listeners={self.max_listeners})"
        )

    # -------------------- configuration --------------------
    @property
    def config(self) -> EmitterConfig:
        return self._config

    @property
    def max_listeners(self) -> Optional[int]:
        return self._config.max_listeners

    @property
    def sink(self) -> DiagnosticSink:
        return self._config.sink

    # -------------------- registration API --------------------
    def on(
        self,
        event: str,
        handler: HandlerFunc,
        context: Any = None,
        weight: int = 1,
        repeat: int = UNLIMITED,
    ) -> "EventEmitter":
        """
        Register a listener for an event.
        Higher weight listeners run first. For equal weight, registration order is preserved.

        Args:
            event (str): The event to register the listener for.
            handler (HandlerFunc): The listener to register.
            context (Any, optional): Receiver the handler is bound to, as if it were
                                     a method of that object. Defaults to None.
            weight (int, optional): The weight of the listener. Defaults to 1.
            repeat (int, optional): How many emissions the listener fires on.
                                    Defaults to UNLIMITED (0). ONCE is 1.

        Returns:
            EventEmitter: self, for chaining.

        Raises:
            InvalidArgument: on an empty event name, a non-callable handler,
                             or a non-integer weight/repeat.
        """
        _check_event(event)
        _check_callable(handler)
        if not _is_int(weight):
            raise InvalidArgument(f"weight must be an integer, got {weight!r}")
        if not _is_int(repeat) or repeat < 0:
            raise InvalidArgument(
                f"repeat must be a non-negative integer, got {repeat!r}"
            )

        with self._lock:
            records = self._events.get(event, [])
            limit = self.max_listeners
            if limit is not None and len(records) >= limit:
                self._warn(f'Max listeners ({limit}) for event "{event}" is reached!')
                return self

            if any(r.matches(handler, context) for r in records):
                self._warn(f'Event "{event}" already has the specified listener.')
                return self

            bound = handler if context is None else types.MethodType(handler, context)
            record = _Listener(
                handler=bound,
                original=handler,
                context=context,
                weight=weight,
                remaining=None if repeat == UNLIMITED else repeat,
            )
            index = next(
                (i for i, r in enumerate(records) if r.weight < weight), len(records)
            )
            records.insert(index, record)
            self._events[event] = records
        return self

    def once(
        self,
        event: str,
        handler: HandlerFunc,
        context: Any = None,
        weight: int = 1,
    ) -> "EventEmitter":
        """Register a listener that fires on the next emission only."""
        return self.on(event, handler, context, weight, ONCE)

    def off(
        self,
        event: str,
        handler: Optional[HandlerFunc] = None,
        context: Any = None,
    ) -> "EventEmitter":
        """
        Unregister listeners. If `handler` is None, remove all listeners for `event`.
        Otherwise remove the listeners registered with exactly this handler and context.

        Args:
            event (str): The event to unregister listeners for.
            handler (Optional[HandlerFunc], optional): The listener to unregister.
                                                       Defaults to None.
            context (Any, optional): The context it was registered with.
                                     Defaults to None.

        Returns:
            EventEmitter: self, for chaining.
        """
        with self._lock:
            records = self._events.get(event)
            if not records:
                return self
            if handler is None:
                removed, kept = records, []
            else:
                removed = [r for r in records if r.matches(handler, context)]
                kept = [r for r in records if r not in removed]
            # in-flight dispatch snapshots must skip removed listeners
            for r in removed:
                r.remaining = 0
            if kept:
                self._events[event] = kept
            else:
                del self._events[event]
        return self

    def on_any(self, callback: HandlerFunc) -> "EventEmitter":
        """
        Register a wildcard listener, called as callback(event, *args, **kwargs)
        on every emission.

        Raises:
            InvalidArgument: if callback is not callable.
        """
        _check_callable(callback)
        with self._lock:
            if callback in self._any:
                self._warn("Wildcard listener is already registered.")
                return self
            self._any.append(callback)
        return self

    def off_any(self, callback: HandlerFunc) -> "EventEmitter":
        """Remove a wildcard listener. No-op if it is not registered."""
        with self._lock:
            self._any = [cb for cb in self._any if cb != callback]
        return self

    def clear(self) -> "EventEmitter":
        """Remove all listeners, wildcard ones included. Configuration is kept."""
        with self._lock:
            for records in self._events.values():
                for r in records:
                    r.remaining = 0
            self._events.clear()
            self._any = []
        return self

    # -------------------- introspection --------------------
    def listener_count(self, event: str) -> int:
        with self._lock:
            return len(self._events.get(event, ()))

    def event_names(self) -> List[str]:
        with self._lock:
            return list(self._events)

    def listeners(self, event: str) -> List[HandlerFunc]:
        """Return the bound handlers for `event` in dispatch order."""
        with self._lock:
            return [r.handler for r in self._events.get(event, ())]

    def any_listeners(self) -> List[HandlerFunc]:
        with self._lock:
            return list(self._any)

    # -------------------- decorator --------------------
    def receiver(self, event: str, *, weight: int = 1, repeat: int = UNLIMITED):
        """
        Decorator to register a function as a listener for `event`.

        Args:
            event (str): The event to register the listener for.
            weight (int, optional): The weight of the listener. Defaults to 1.
            repeat (int, optional): Repeat budget. Defaults to UNLIMITED.

        Returns:
            Callable[[HandlerFunc], HandlerFunc]: The decorator function.
        """

        def wrapper(func: HandlerFunc) -> HandlerFunc:
            self.on(event, func, weight=weight, repeat=repeat)
            return func

        return wrapper

    # -------------------- dispatch --------------------
    def emit(self, event: str, *args: Any, **kwargs: Any) -> "EventEmitter":
        """
        Dispatch `event` synchronously to its listeners, then to the wildcard listeners.
        Exceptions raised by listeners are reported to the sink and never propagate.

        A listener that returns an awaitable is scheduled on the running event
        loop; without a running loop the awaitable is closed and a warning issued.

        Args:
            event (str): The event to dispatch.
            *args: Positional arguments to pass to the listeners.
            **kwargs: Keyword arguments to pass to the listeners.

        Returns:
            EventEmitter: self, for chaining.
        """
        spent: List[_Listener] = []
        for record in self._snapshot(event):
            if record.exhausted:
                continue
            if record.consume():
                spent.append(record)
            try:
                result = record.handler(*args, **kwargs)
            except Exception as exc:
                self._error(f'Error in event "{event}" listener', exc)
                continue
            if inspect.isawaitable(result):
                self._settle_later(event, result)
        self._discard(event, spent)

        for callback in self.any_listeners():
            try:
                result = callback(event, *args, **kwargs)
            except Exception as exc:
                self._error(f'Error in wildcard listener for event "{event}"', exc)
                continue
            if inspect.isawaitable(result):
                self._settle_later(event, result)
        return self

    async def emit_async(self, event: str, *args: Any, **kwargs: Any) -> "EventEmitter":
        """
        Dispatch `event` to its listeners, then to the wildcard listeners,
        awaiting each one before starting the next.
        Sync listeners are called directly; failures are reported to the sink.

        Args:
            event (str): The event to dispatch.
            *args: Positional arguments to pass to the listeners.
            **kwargs: Keyword arguments to pass to the listeners.

        Returns:
            EventEmitter: self, for chaining.
        """
        spent: List[_Listener] = []
        for record in self._snapshot(event):
            if record.exhausted:
                continue
            if record.consume():
                spent.append(record)
            try:
                result = record.handler(*args, **kwargs)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                self._error(f'Error in async event "{event}" listener', exc)
        self._discard(event, spent)

        for callback in self.any_listeners():
            try:
                result = callback(event, *args, **kwargs)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                self._error(
                    f'Error in async wildcard listener for event "{event}"', exc
                )
        return self

    # -------------------- internals --------------------
    def _snapshot(self, event: str) -> List[_Listener]:
        with self._lock:
            return list(self._events.get(event, ()))

    def _discard(self, event: str, spent: List[_Listener]) -> None:
        if not spent:
            return
        with self._lock:
            current = self._events.get(event)
            if current is None:
                return
            # Remove by identity
            kept = [r for r in current if r not in spent]
            if kept:
                self._events[event] = kept
            else:
                del self._events[event]

    def _settle_later(self, event: str, awaitable: Any) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            close = getattr(awaitable, "close", None)
            if close is not None:
                close()
            self._warn(
                f'Listener for event "{event}" returned an awaitable outside '
                "a running event loop; use emit_async() instead."
            )
            return
        task = asyncio.ensure_future(awaitable)
        self._pending.add(task)
        task.add_done_callback(partial(self._settled, event))

    def _settled(self, event: str, task: "asyncio.Future[Any]") -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._error(f'Error in event "{event}" listener', exc)

    def _warn(self, message: str) -> None:
        try:
            self.sink.warn(message)
        except Exception:
            logger.exception("Diagnostic sink failed to record warning: %s", message)

    def _error(self, message: str, cause: BaseException) -> None:
        try:
            self.sink.error(message, cause)
        except Exception:
            logger.exception("Diagnostic sink failed to record error: %s", message)
