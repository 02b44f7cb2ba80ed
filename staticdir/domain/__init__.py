"""Pure domain pieces: configuration, path normalization, outcome types.

Nothing here touches FastAPI or performs I/O, apart from the existence check
in `ServerConfig.from_root()`.
"""
__all__ = ["config", "outcomes", "paths"]
