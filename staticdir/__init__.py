"""Static directory server package.

Serves files below a single root directory over HTTP. The resolution logic
lives in `staticdir.domain` and `staticdir.service`; `staticdir.main` wires it
into a FastAPI app.
"""
from importlib.metadata import PackageNotFoundError, version

try:  # Resolves when installed; falls back for a plain checkout.
    __version__ = version("staticdir")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
