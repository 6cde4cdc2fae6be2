"""noticegen - third-party notice generation with license allow-list checks."""

__version__ = "0.1.0"
