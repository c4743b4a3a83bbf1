"""
microemitter.errors
-------------------

Exceptions raised by the emitter.
"""


class InvalidArgument(TypeError):
    """
    Raised when a registration call receives a malformed argument:
    an empty event name, a non-callable handler, or a bad weight/repeat value.
    """
