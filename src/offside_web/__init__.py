"""Flask surface of the offside indentation engine."""
from .web import app, main

__all__ = ["app", "main"]
