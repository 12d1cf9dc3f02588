"""Backend package providing the REST API for expense tracking."""

__all__ = [
    "database",
    "models",
    "schemas",
    "crud",
    "server",
]
