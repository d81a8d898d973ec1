"""UISight — heuristic visual analysis of UI screenshots."""

__version__ = "0.1.0"
