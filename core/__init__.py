"""Core components of docspeak.

This package contains the read-aloud subsystem and the version information.
"""

from core.version import VERSION

__all__: list[str] = ["VERSION"]
