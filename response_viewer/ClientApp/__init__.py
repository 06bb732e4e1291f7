"""PySide6 desktop client."""
