"""
microemitter.core
-----------------

Module-level API over a process-wide default emitter.
"""

from typing import Any, Callable, List, Optional

from .emitter import UNLIMITED, EventEmitter, HandlerFunc

# -------------------- module-level default emitter --------------------

_default_emitter = EventEmitter()


def get_emitter() -> EventEmitter:
    """Return the process-wide default emitter."""
    return _default_emitter


# Registration
def on(
    event: str,
    handler: HandlerFunc,
    context: Any = None,
    weight: int = 1,
    repeat: int = UNLIMITED,
) -> EventEmitter:
    """
    Register a listener for an event on the default emitter.
    Higher weight listeners run first. For equal weight, registration order is preserved.

    Args:
        event (str): The event to register the listener for.
        handler (HandlerFunc): The listener to register.
        context (Any, optional): Receiver the handler is bound to. Defaults to None.
        weight (int, optional): The weight of the listener. Defaults to 1.
        repeat (int, optional): How many emissions the listener fires on.
                                Defaults to UNLIMITED (0).

    Returns:
        EventEmitter: The default emitter.
    """
    return _default_emitter.on(event, handler, context, weight, repeat)


def once(
    event: str, handler: HandlerFunc, context: Any = None, weight: int = 1
) -> EventEmitter:
    """Register a one-shot listener on the default emitter."""
    return _default_emitter.once(event, handler, context, weight)


def off(
    event: str, handler: Optional[HandlerFunc] = None, context: Any = None
) -> EventEmitter:
    """
    Unregister listeners. If `handler` is None, remove all listeners for `event`.

    Args:
        event (str): The event to unregister listeners for.
        handler (Optional[HandlerFunc], optional): The listener to unregister.
                                                   Defaults to None.
        context (Any, optional): The context it was registered with. Defaults to None.

    Returns:
        EventEmitter: The default emitter.
    """
    return _default_emitter.off(event, handler, context)


def on_any(callback: HandlerFunc) -> EventEmitter:
    return _default_emitter.on_any(callback)


def off_any(callback: HandlerFunc) -> EventEmitter:
    return _default_emitter.off_any(callback)


def clear() -> EventEmitter:
    """
    Remove all listeners from the default emitter.

    Returns:
        EventEmitter: The default emitter.
    """
    return _default_emitter.clear()


def listener_count(event: str) -> int:
    return _default_emitter.listener_count(event)


def event_names() -> List[str]:
    return _default_emitter.event_names()


def listeners(event: str) -> List[HandlerFunc]:
    """
    Return the handlers registered for `event`, in dispatch order.

    Args:
        event (str): The event to list listeners for.

    Returns:
        List[HandlerFunc]: A copy of the handler list.
    """
    return _default_emitter.listeners(event)


def _get_emitter(emitter: Optional[EventEmitter] = None) -> EventEmitter:
    return emitter or _default_emitter


# Decorator
def receiver(
    event: str,
    *,
    weight: int = 1,
    repeat: int = UNLIMITED,
    emitter: Optional[EventEmitter] = None,
) -> Callable[[HandlerFunc], HandlerFunc]:
    """
    Decorator to register a function as a listener for `event`.

    Args:
        event (str): The event to register the listener for.
        weight (int, optional): The weight of the listener. Defaults to 1.
        repeat (int, optional): Repeat budget. Defaults to UNLIMITED.
        emitter (EventEmitter, optional): The emitter to register on.
                                          Defaults to None. If None, the default emitter is used.

    Returns:
        Callable[[HandlerFunc], HandlerFunc]: The decorator function.

    Example:
    @receiver("my_event", weight=5, repeat=ONCE)
    def my_handler(*args, **kwargs):
        print("my_handler called with args: ", args, "kwargs: ", kwargs)
    """
    return _get_emitter(emitter).receiver(event, weight=weight, repeat=repeat)


# Dispatch
def emit(event: str, *args: Any, **kwargs: Any) -> EventEmitter:
    """
    Dispatch `event` synchronously on the default emitter.

    Example:
    emit("my_event", arg1, arg2)
    """
    return _default_emitter.emit(event, *args, **kwargs)


async def emit_async(event: str, *args: Any, **kwargs: Any) -> EventEmitter:
    """
    Dispatch `event` on the default emitter, awaiting each listener in turn.

    Example:
    await emit_async("my_event", arg1, arg2)
    """
    return await _default_emitter.emit_async(event, *args, **kwargs)
