"""Logging setup for the bufrplan command line."""

from bufrplan.observability.logging import level_for_verbosity, setup_logging

__all__ = ["level_for_verbosity", "setup_logging"]
