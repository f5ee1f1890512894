"""axwatch - screen change and notification context for desktop agents."""

__version__ = "0.1.0"
