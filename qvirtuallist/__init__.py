"""PySide6 virtualized list widget with pooled item panels and a demo gallery."""

__version__ = '0.3.0'
