"""Internal constants shared across the library."""

DATABASE_URL = "https://database.api.gokoji.com"
REST_URL = "https://rest.api.gokoji.com"

# ------------------------------------------------------------------
# Host message names
# ------------------------------------------------------------------

EVENT_READY = "Koji.Ready"
EVENT_IS_REMIXING = "KojiPreview.IsRemixing"
EVENT_SET_VALUE = "KojiPreview.SetValue"
EVENT_DID_CHANGE_VCC = "KojiPreview.DidChangeVcc"
EVENT_FINISH = "KojiPreview.Finish"
EVENT_CANCEL = "KojiPreview.Cancel"
EVENT_ENCRYPT_VALUE = "KojiPreview.EncryptValue"
EVENT_VALUE_ENCRYPTED = "KojiPreview.ValueEncrypted"
EVENT_DECRYPT_VALUE = "KojiPreview.DecryptValue"
EVENT_VALUE_DECRYPTED = "KojiPreview.ValueDecrypted"

#: Path under which the whole value tree is pushed to the host.
REMIX_DATA_PATH: tuple[str, ...] = ("remixData",)

# ------------------------------------------------------------------
# Backend REST routes
# ------------------------------------------------------------------

KEYSTORE_GET_ROUTE = "/v1/keystore/get"
CREATE_SIGNED_REQUEST_ROUTE = "/v1/cdn/signedRequest/create"
