"""Builder and observer pattern helpers, in the builder and observer modules."""

__version__ = "0.1.1"
__all__ = ["builder", "observer"]