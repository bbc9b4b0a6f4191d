"""chatframe - terminal chat with resumable conversations."""

__version__ = "0.1.0"
