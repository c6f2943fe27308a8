"""schemaledger - apply versioned SQL migrations exactly once."""

__version__ = "1.0.0"
