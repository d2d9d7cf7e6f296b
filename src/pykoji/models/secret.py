"""Request models for the keystore and CDN signing API."""

from __future__ import annotations

from pydantic import Field

from pykoji.models._base import KojiBaseModel


class KeystoreGetRequest(KojiBaseModel):
    scope: str
    token: str
    key_path: str


class SignedUrlRequest(KojiBaseModel):
    resource: str
    expire_seconds: int | None = Field(default=None, gt=0)
