"""Backend helpers wrapping the platform's REST services."""

from pykoji.backend.database import Database
from pykoji.backend.secret import Secret

__all__ = ["Database", "Secret"]
