"""Configuration-session manager for network device automation.

Turns candidate device configuration text into commands replayed inside an
isolated configuration session on the device, with replace/merge semantics
and an abort path.
"""

__version__ = "0.1.0"
