"""Wire models for host messages and backend requests."""

from pykoji.models._base import KojiBaseModel
from pykoji.models.database import (
    DatabaseHttpStatusCode,
    DatabaseRoute,
    Predicate,
    PredicateOperator,
)
from pykoji.models.host import (
    DecryptValueData,
    EncryptValueData,
    HostEvent,
    SetValueData,
)

__all__ = [
    "DatabaseHttpStatusCode",
    "DatabaseRoute",
    "DecryptValueData",
    "EncryptValueData",
    "HostEvent",
    "KojiBaseModel",
    "Predicate",
    "PredicateOperator",
    "SetValueData",
]
