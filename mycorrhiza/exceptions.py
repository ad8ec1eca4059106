"""Mycorrhiza exception hierarchy.

The simulation itself degrades continuously instead of raising; these
classes cover the seams around it (configuration input, persistence).
"""


class MycorrhizaError(Exception):
    """Root of all mycorrhiza domain exceptions."""


class SimulationError(MycorrhizaError):
    """Errors during simulation execution (engines, session)."""


class ConfigurationError(MycorrhizaError):
    """Invalid or missing configuration."""


class PersistenceError(MycorrhizaError):
    """Errors during snapshot export."""
