"""Live views kept in sync with store change notifications."""

from .coordinator import LiveRefreshCoordinator

__all__ = ["LiveRefreshCoordinator"]
