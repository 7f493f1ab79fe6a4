"""Fretboard Arranger — ergonomic guitar fingerings and ASCII tablature.

Sub-package ``arrangement_engine`` holds the engine; ``config``,
``logging`` and ``main`` provide the request model, structured logs and
the command line.
"""

__version__ = "0.1.0"
