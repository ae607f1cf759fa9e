"""Top-level package exports for reactAgent."""

from .runtime import Orchestrator, Session, build_application

__version__ = "0.1.0"

__all__ = ["Orchestrator", "Session", "build_application", "__version__"]
