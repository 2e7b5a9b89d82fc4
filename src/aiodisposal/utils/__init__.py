"""Various utilities that are needed by the disposal controller."""

__all__ = ("nop",)


def nop(*args, **kwds) -> None:
    """Function that accepts arbitrary arguments and does nothing. Used as
    the disposal action of entries that cannot be disposed.
    """
    pass
