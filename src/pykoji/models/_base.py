"""Base model for host messages and backend request bodies.

Every pykoji wire model inherits from :class:`KojiBaseModel` which
provides:

* ``alias_generator=to_camel`` so snake_case fields serialize to the
  camelCase keys the platform expects.
* :meth:`KojiBaseModel.to_body`, which drops optional top-level fields
  left at ``None`` the same way a JSON encoder drops ``undefined``
  properties. Required fields are always sent, ``null`` included.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class KojiBaseModel(BaseModel):
    """Base for pykoji wire models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_body(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting optional fields left at ``None``.

        A field is dropped only when its declared default is ``None`` and it
        still holds ``None``. Required fields and nested values (document
        bodies, value trees) are passed through, ``None`` included.
        """
        dumped = self.model_dump(by_alias=True, mode="json")
        for name, info in type(self).model_fields.items():
            if info.default is None and getattr(self, name) is None:
                dumped.pop(info.serialization_alias or info.alias or name, None)
        return dumped
