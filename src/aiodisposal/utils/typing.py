from typing import (
    Any,
    Awaitable,
    Callable,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)


__all__ = (
    "DisposalAction",
    "DisposalEntry",
    "SupportsAsyncClose",
    "SupportsClose",
)

#: Type alias for the zero-argument actions that a disposal entry resolves to
DisposalAction = Callable[[], Optional[Awaitable[Any]]]


@runtime_checkable
class SupportsClose(Protocol):
    """Objects that can be closed synchronously."""

    def close(self) -> Any:
        ...


@runtime_checkable
class SupportsAsyncClose(Protocol):
    """Objects that can be closed asynchronously."""

    def aclose(self) -> Awaitable[Any]:
        ...


#: Type alias for objects that can be registered in a disposal controller.
#: The shape of an entry is checked only when it is disposed.
DisposalEntry = Union[DisposalAction, SupportsClose, SupportsAsyncClose]
