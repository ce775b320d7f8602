from pydantic import BaseModel, ConfigDict

KIND_WALLET = "wallet"
KIND_TOKEN_MINT = "token-mint"
KIND_UNKNOWN = "unknown"


class AddressInfo(BaseModel):
    """Validated view of the user-supplied address. Immutable."""

    model_config = ConfigDict(frozen=True)

    raw: str
    normalized: str = ""
    valid: bool = False
    kind: str = KIND_UNKNOWN  # wallet | token-mint | unknown
    format: str = "Unknown"
    length: int = 0
    message: str = ""
