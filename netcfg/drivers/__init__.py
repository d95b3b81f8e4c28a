"""Concrete transport drivers.

Each driver subclasses ``BaseDriver`` and supplies the channel primitives
using the appropriate SSH library.
"""

from .netmiko_driver import NetmikoDriver

__all__ = [
    "NetmikoDriver",
]
