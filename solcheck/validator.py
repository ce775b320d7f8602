"""Solana address validation. Pure, no I/O."""

import re

import base58

from solcheck.exceptions import ValidationError
from solcheck.models.address import KIND_UNKNOWN, AddressInfo

SOLANA_ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")
PUBKEY_BYTES = 32

KNOWN_PROGRAMS = {
    "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA": "SPL Token Program",
    "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb": "SPL Token-2022 Program",
    "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL": "Associated Token Program",
    "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s": "Metaplex Token Metadata",
    "11111111111111111111111111111111": "System Program",
    "Vote111111111111111111111111111111111111111": "Vote Program",
}


def identify_program(address: str) -> str | None:
    return KNOWN_PROGRAMS.get(address)


def validate_address(raw: str) -> AddressInfo:
    """Classify ``raw`` as a well-formed Solana address.

    Wallets and token mints share the same format, so ``kind`` stays
    ``unknown`` here; on-chain account data decides it later.
    """
    normalized = (raw or "").strip()
    length = len(normalized)

    if not normalized:
        return AddressInfo(
            raw=raw or "",
            normalized="",
            valid=False,
            format="Empty",
            length=0,
            message="Please provide a Solana address.",
        )

    if not SOLANA_ADDRESS_RE.match(normalized):
        return AddressInfo(
            raw=raw,
            normalized=normalized,
            valid=False,
            format="Invalid",
            length=length,
            message="Invalid address format. Expected 32-44 base58 characters.",
        )

    if len(base58.b58decode(normalized)) != PUBKEY_BYTES:
        return AddressInfo(
            raw=raw,
            normalized=normalized,
            valid=False,
            format="Base58",
            length=length,
            message="Invalid address format. Address does not decode to a 32-byte public key.",
        )

    program = identify_program(normalized)
    message = f"Valid Solana address ({program})" if program else "Valid Solana address"
    return AddressInfo(
        raw=raw,
        normalized=normalized,
        valid=True,
        kind=KIND_UNKNOWN,
        format="Base58",
        length=length,
        message=message,
    )


def validate_address_or_raise(raw: str) -> AddressInfo:
    info = validate_address(raw)
    if not info.valid:
        raise ValidationError(info.message)
    return info
