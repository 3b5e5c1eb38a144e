"""prreviewer core library - storage, assignment engine and queries."""
from . import assignment
from . import config
from . import errors
from . import models
from . import schemas
from . import storage

__all__ = [
    "assignment",
    "config",
    "errors",
    "models",
    "schemas",
    "storage",
]
