"""catalogctl — versioned product and review catalog with optimistic concurrency."""

__version__ = "0.1.0"
