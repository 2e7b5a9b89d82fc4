"""Disposal controller that aggregates cleanup actions behind a single
context manager.
"""

from contextlib import closing
from functools import partial
from inspect import isawaitable, iscoroutine
from typing import Any, Dict, Iterable, Iterator, List, Optional, TypeVar

from aiodisposal.utils import nop
from aiodisposal.utils.typing import DisposalAction, DisposalEntry

__all__ = ("DisposalController", "create_disposal_controller")

T = TypeVar("T")

#: Marker that takes the place of removed entries in the slot list
_REMOVED = object()


def _get_capability(entry: DisposalEntry, name: str) -> Optional[DisposalAction]:
    method = getattr(entry, name, None)
    return method if callable(method) else None


def _resolve(entry: DisposalEntry, *, asynchronous: bool) -> DisposalAction:
    """Resolves a disposal entry to a zero-argument action that disposes it.

    Callables are returned intact. Other objects are disposed via their
    ``close()`` or ``aclose()`` method; the method matching the requested
    mode takes precedence and the other one is used as a fallback. Entries
    that have neither are resolved to a function that does nothing.
    """
    if callable(entry):
        return entry

    names = ("aclose", "close") if asynchronous else ("close", "aclose")
    for name in names:
        action = _get_capability(entry, name)
        if action is not None:
            return action

    return nop


class DisposalController:
    """Object that collects disposal entries and disposes all of them when
    the controller itself is disposed.

    A disposal entry is either a function that can be called with no
    arguments, or an object with a ``close()`` method, an ``aclose()``
    method or both. The shape of an entry is checked only when the entry is
    disposed, so an object may be registered before it acquires its
    ``close()`` or ``aclose()`` method. Entries are told apart by identity;
    two distinct objects that compare equal are two separate entries.

    The controller should be used as a context manager, e.g.::

        async with DisposalController() as controller:
            controller.add(stream)
            controller.add(timer.cancel)
            # ...do anything here...
        # stream.aclose() and timer.cancel() were called when the context
        # was exited

    Entries are disposed in the order they were added. The first entry that
    raises an exception aborts the disposal; the remaining entries are not
    disposed and the exception is propagated to the caller.
    """

    _slots: List[Any]
    _positions: Dict[int, int]

    def __init__(self, entries: Iterable[DisposalEntry] = ()):
        """Constructor.

        Parameters:
            entries: the initial disposal entries of the controller, in the
                order they should be disposed
        """
        self._slots = []
        self._positions = {}
        self._running = 0
        self._disposed = False

        for entry in entries:
            self.add(entry)

    def __contains__(self, entry: DisposalEntry) -> bool:
        return id(entry) in self._positions

    def __iter__(self) -> Iterator[DisposalEntry]:
        return iter([entry for entry in self._slots if entry is not _REMOVED])

    def __len__(self) -> int:
        return len(self._positions)

    def __enter__(self) -> "DisposalController":
        return self

    def __exit__(self, exc_type, exc_value, tb) -> bool:
        self.dispose()
        return False

    async def __aenter__(self) -> "DisposalController":
        return self

    async def __aexit__(self, exc_type, exc_value, tb) -> bool:
        await self.async_dispose()
        return False

    @property
    def disposed(self) -> bool:
        """Returns whether the controller has completed a disposal pass."""
        return self._disposed

    def add(self, entry: T) -> T:
        """Adds a new disposal entry to the controller.

        Adding an entry that is already registered has no effect. The entry
        is returned intact so this method may also be used as a decorator.

        Parameters:
            entry: a function that can be called with no arguments, or an
                object with a ``close()`` or ``aclose()`` method

        Returns:
            the entry itself
        """
        key = id(entry)
        if key not in self._positions:
            self._positions[key] = len(self._slots)
            self._slots.append(entry)
        return entry

    def callback(self, func, *args, **kwds) -> partial:
        """Registers a function to be called with the given positional and
        keyword arguments when the controller is disposed.

        Returns:
            the registered entry; pass it to `delete()` to unregister the
            function
        """
        return self.add(partial(func, *args, **kwds))

    def delete(self, entry: DisposalEntry) -> None:
        """Removes a disposal entry from the controller.

        Use this method when the resource represented by the entry was
        disposed manually and it should not be disposed again by the
        controller. Removing an entry that is not registered has no effect.
        """
        index = self._positions.pop(id(entry), None)
        if index is not None:
            self._slots[index] = _REMOVED
            self._compact()

    discard = delete

    def dispose(self) -> None:
        """Disposes all the entries of the controller synchronously, in the
        order they were added.

        Asynchronous entries are called but not awaited. Coroutines returned
        by them are closed without running, so their bodies are not executed.
        """
        with closing(self._iter_live_entries()) as entries:
            for entry in entries:
                result = _resolve(entry, asynchronous=False)()
                if iscoroutine(result):
                    result.close()
        self._disposed = True

    close = dispose

    async def async_dispose(self) -> None:
        """Disposes all the entries of the controller, in the order they were
        added, waiting for each asynchronous entry to finish before moving on
        to the next one.
        """
        with closing(self._iter_live_entries()) as entries:
            for entry in entries:
                result = _resolve(entry, asynchronous=True)()
                if isawaitable(result):
                    await result
        self._disposed = True

    aclose = async_dispose

    def _compact(self) -> None:
        """Drops the removed entries from the slot list when it has become
        mostly empty and no disposal pass is walking it.
        """
        if self._running or len(self._slots) <= 2 * len(self._positions):
            return

        self._slots = [entry for entry in self._slots if entry is not _REMOVED]
        self._positions = {
            id(entry): index for index, entry in enumerate(self._slots)
        }

    def _iter_live_entries(self) -> Iterator[DisposalEntry]:
        """Iterates over the entries of the controller in the order they were
        added, taking into account entries that are added or removed while
        the iteration is in progress.
        """
        self._running += 1
        try:
            index = 0
            while index < len(self._slots):
                entry = self._slots[index]
                index += 1
                if entry is not _REMOVED:
                    yield entry
        finally:
            self._running -= 1
            self._compact()


create_disposal_controller = DisposalController
