"""RPC batch payload → balance, transaction and account records."""

import base64
import binascii
import time
from typing import Any

from solcheck.models.records import (
    NOT_FOUND,
    UNKNOWN,
    AccountRecord,
    BalanceRecord,
    RecentTransaction,
    TokenHolding,
    TransactionRecord,
)
from solcheck.models.upstream import UpstreamResponse
from solcheck.parsers.extract import dig, safe_float, safe_int, safe_str, ts_to_date
from solcheck.parsers.rpc.client import TOKEN_2022_PROGRAM_ID, TOKEN_PROGRAM_ID, batch_errors
from solcheck.utils.formatting import format_sol
from solcheck.validator import identify_program

LAMPORTS_PER_SOL = 1_000_000_000
SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
MAX_TOKENS_LISTED = 10
MAX_RECENT_TRANSACTIONS = 5
SECONDS_PER_DAY = 86400
MAX_DECIMALS = 255  # u8 on chain


def lamports_to_sol(lamports: object) -> float:
    return safe_float(lamports) / LAMPORTS_PER_SOL


def _result(response: UpstreamResponse, method: str) -> Any:
    return dig(response.payload, method, "result")


def _method_error(response: UpstreamResponse, *methods: str) -> str:
    """Soft-failure kind when any of ``methods`` failed inside the batch."""
    errors = batch_errors(response.payload)
    for method in methods:
        if method in errors:
            return f"request_failed: rpc {method}: {errors[method]}"
    return ""


def normalize_balance(response: UpstreamResponse, sol_price_usd: float = 0.0) -> BalanceRecord:
    if not response.success:
        return BalanceRecord(error=response.error or "")
    error = _method_error(response, "getBalance", "getTokenAccountsByOwner", "getProgramAccounts")
    if error:
        return BalanceRecord(error=error)

    sol_balance = lamports_to_sol(dig(_result(response, "getBalance"), "value"))
    token_accounts = dig(_result(response, "getTokenAccountsByOwner"), "value", default=[])
    token_2022_accounts = _result(response, "getProgramAccounts") or []
    if not isinstance(token_accounts, list):
        token_accounts = []
    if not isinstance(token_2022_accounts, list):
        token_2022_accounts = []

    tokens: list[TokenHolding] = []
    nft_count = 0
    for account in token_accounts:
        info = dig(account, "account", "data", "parsed", "info", default={})
        decimals = safe_int(dig(info, "tokenAmount", "decimals"))
        raw_amount = safe_int(dig(info, "tokenAmount", "amount"))
        ui_amount = safe_float(dig(info, "tokenAmount", "uiAmount"))
        if decimals == 0 and raw_amount == 1:
            nft_count += 1
        if ui_amount > 0:
            tokens.append(
                TokenHolding(mint=safe_str(dig(info, "mint")), amount=ui_amount, decimals=decimals)
            )

    return BalanceRecord(
        available=True,
        sol_balance=sol_balance,
        sol_balance_usd=round(sol_balance * max(sol_price_usd, 0.0), 2),
        sol_balance_formatted=format_sol(sol_balance),
        token_count=len(token_accounts) + len(token_2022_accounts),
        nft_count=nft_count,
        tokens=tokens[:MAX_TOKENS_LISTED],
    )


def normalize_transactions(response: UpstreamResponse, now: float | None = None) -> TransactionRecord:
    """Signatures arrive newest first; the oldest one bounds first activity."""
    if not response.success:
        return TransactionRecord(error=response.error or "")
    error = _method_error(response, "getSignaturesForAddress")
    if error:
        return TransactionRecord(error=error)

    signatures = _result(response, "getSignaturesForAddress") or []
    if not isinstance(signatures, list):
        signatures = []
    signatures = [s for s in signatures if isinstance(s, dict)]
    if not signatures:
        return TransactionRecord(available=True)

    now = time.time() if now is None else now
    last_ts = safe_int(signatures[0].get("blockTime"))
    first_ts = safe_int(signatures[-1].get("blockTime"))

    recent = [
        RecentTransaction(
            signature=safe_str(sig.get("signature")),
            timestamp=safe_int(sig.get("blockTime")),
            date=ts_to_date(safe_int(sig.get("blockTime")), "%Y-%m-%d %H:%M:%S"),
            status="failed" if sig.get("err") is not None else "success",
        )
        for sig in signatures[:MAX_RECENT_TRANSACTIONS]
    ]

    return TransactionRecord(
        available=True,
        total_count=len(signatures),
        first_seen_ts=first_ts,
        last_seen_ts=last_ts,
        first_seen_date=ts_to_date(first_ts),
        last_seen_date=ts_to_date(last_ts),
        account_age_days=max(int((now - first_ts) // SECONDS_PER_DAY), 0) if first_ts else 0,
        recent_list=recent,
    )


def _data_size(value: dict[str, Any]) -> int:
    if "space" in value:
        return safe_int(value["space"])
    data = value.get("data")
    if isinstance(data, dict):
        return safe_int(data.get("space"))
    if isinstance(data, list) and data and isinstance(data[0], str):
        try:
            return len(base64.b64decode(data[0]))
        except (binascii.Error, ValueError):
            return 0
    return 0


def normalize_account(response: UpstreamResponse) -> AccountRecord:
    if not response.success:
        return AccountRecord(error=response.error or "")
    error = _method_error(response, "getAccountInfo")
    if error:
        return AccountRecord(error=error)

    value = dig(_result(response, "getAccountInfo"), "value")
    if not isinstance(value, dict):
        # Address has never been funded / initialized on chain
        return AccountRecord(available=True, account_type="Not initialized")

    owner = safe_str(value.get("owner"))
    executable = bool(value.get("executable", False))
    parsed = dig(value, "data", "parsed", default={})
    parsed_type = parsed.get("type") if isinstance(parsed, dict) else None
    info = dig(parsed, "info", default={})
    if not isinstance(info, dict):
        info = {}

    is_token = parsed_type == "mint"
    decimals = min(max(safe_int(info.get("decimals")), 0), MAX_DECIMALS) if is_token else 0
    supply = safe_float(info.get("supply")) / (10**decimals) if is_token else 0.0

    if executable:
        account_type = "Program"
    elif is_token:
        account_type = "Token Mint"
    elif owner in (TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID):
        account_type = "Token Account"
    elif owner == SYSTEM_PROGRAM_ID:
        account_type = "System Account"
    else:
        account_type = UNKNOWN

    return AccountRecord(
        available=True,
        exists=True,
        owner=owner,
        executable=executable,
        data_size=_data_size(value),
        rent_epoch=safe_int(value.get("rentEpoch")),
        lamports=safe_int(value.get("lamports")),
        account_type=account_type,
        program_name=identify_program(owner) or UNKNOWN,
        is_token=is_token,
        decimals=decimals,
        supply=supply,
        mint_authority=safe_str(info.get("mintAuthority"), NOT_FOUND) if is_token else UNKNOWN,
        freeze_authority=safe_str(info.get("freezeAuthority"), NOT_FOUND) if is_token else UNKNOWN,
    )
