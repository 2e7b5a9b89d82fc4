"""Disposal controller that collects synchronous and asynchronous cleanup
actions and runs all of them when the controller itself is disposed.
"""

from .controller import DisposalController, create_disposal_controller
from .version import __version__

__all__ = ("DisposalController", "create_disposal_controller", "__version__")
