"""Tests for the Solana RPC batch client and its normalizers."""

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest

from solcheck.models.records import NOT_FOUND, UNKNOWN
from solcheck.models.upstream import UpstreamResponse
from solcheck.parsers.rpc.client import (
    BATCH_METHODS,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    RpcClient,
    batch_errors,
    build_batch,
)
from solcheck.parsers.rpc.normalizer import (
    normalize_account,
    normalize_balance,
    normalize_transactions,
)

WALLET = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"
MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"
NOW = 1_700_000_000
DAY = 86400


def _token_account(mint: str, amount: str, decimals: int, ui_amount: float) -> dict:
    return {
        "pubkey": "Acct",
        "account": {
            "data": {
                "parsed": {
                    "info": {
                        "mint": mint,
                        "tokenAmount": {"amount": amount, "decimals": decimals, "uiAmount": ui_amount},
                    },
                    "type": "account",
                },
            },
        },
    }


def _rpc(**results) -> UpstreamResponse:
    payload = {method: {"result": results.get(method)} for method in BATCH_METHODS}
    return UpstreamResponse.ok("rpc", payload)


class TestBuildBatch:
    def test_one_call_per_method(self) -> None:
        batch = build_batch(WALLET, 500)
        assert [c["method"] for c in batch] == list(BATCH_METHODS)
        assert [c["id"] for c in batch] == [1, 2, 3, 4, 5]
        assert all(c["jsonrpc"] == "2.0" for c in batch)

    def test_signature_limit_capped(self) -> None:
        batch = build_batch(WALLET, 5000)
        sig_call = next(c for c in batch if c["method"] == "getSignaturesForAddress")
        assert sig_call["params"][1] == {"limit": 1000}

    def test_token_2022_filter_on_owner(self) -> None:
        batch = build_batch(WALLET, 10)
        call = next(c for c in batch if c["method"] == "getProgramAccounts")
        assert call["params"][0] == TOKEN_2022_PROGRAM_ID
        assert call["params"][1]["filters"][0]["memcmp"] == {"offset": 32, "bytes": WALLET}


class TestRpcClient:
    @pytest.mark.asyncio
    async def test_batch_response_keyed_by_method(self, client_kwargs) -> None:
        client = RpcClient("https://rpc.example.com", **client_kwargs)
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.json.return_value = [
            {"jsonrpc": "2.0", "id": 2, "result": {"value": 2_500_000_000}},
            {"jsonrpc": "2.0", "id": 1, "result": {"value": None}},
            {"jsonrpc": "2.0", "id": 3, "error": {"code": -32602, "message": "bad param"}},
            {"jsonrpc": "2.0", "id": 4, "result": []},
        ]
        client._client = AsyncMock()
        client._client.post = AsyncMock(return_value=mock_resp)

        result = await client.fetch(WALLET)

        assert result.success is True
        assert result.payload["getBalance"] == {"result": {"value": 2_500_000_000}}
        assert result.payload["getTokenAccountsByOwner"]["error"]["message"] == "bad param"
        assert "error" in result.payload["getProgramAccounts"]
        sent = client._client.post.call_args.kwargs["json"]
        assert len(sent) == len(BATCH_METHODS)

    @pytest.mark.asyncio
    async def test_top_level_rpc_error(self, client_kwargs) -> None:
        client = RpcClient("https://rpc.example.com", **client_kwargs)
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.json.return_value = {"jsonrpc": "2.0", "error": {"code": -32005, "message": "node is behind"}}
        client._client = AsyncMock()
        client._client.post = AsyncMock(return_value=mock_resp)

        result = await client.fetch(WALLET)

        assert result.success is False
        assert result.error == "request_failed: rpc error: node is behind"


class TestNormalizeBalance:
    def test_balance_tokens_and_nfts(self) -> None:
        resp = _rpc(
            getBalance={"value": 1_234_567_890},
            getTokenAccountsByOwner={
                "value": [
                    _token_account(MINT, "5000000", 5, 50.0),
                    _token_account("NftMint1", "1", 0, 1.0),
                    _token_account("EmptyMint", "0", 6, 0.0),
                ]
            },
            getProgramAccounts=[{"pubkey": "T22", "account": {}}],
        )

        record = normalize_balance(resp, sol_price_usd=100.0)

        assert record.available is True
        assert record.sol_balance == pytest.approx(1.23456789)
        assert record.sol_balance_usd == 123.46
        assert record.sol_balance_formatted == "1.2346 SOL"
        assert record.token_count == 4
        assert record.nft_count == 1
        assert [t.mint for t in record.tokens] == [MINT, "NftMint1"]

    def test_tokens_capped_at_ten(self) -> None:
        accounts = [_token_account(f"Mint{i}", "100", 2, 1.0) for i in range(15)]
        record = normalize_balance(_rpc(getBalance={"value": 0}, getTokenAccountsByOwner={"value": accounts}))
        assert record.token_count == 15
        assert len(record.tokens) == 10

    def test_failed_response_keeps_defaults(self) -> None:
        record = normalize_balance(UpstreamResponse.fail("rpc", "rate_limited"))
        assert record.available is False
        assert record.error == "rate_limited"
        assert record.sol_balance == 0.0
        assert record.sol_balance_formatted == "0.0000 SOL"


class TestNormalizeTransactions:
    def test_first_and_last_seen(self) -> None:
        sigs = [
            {"signature": "sig3", "blockTime": NOW - DAY, "err": None},
            {"signature": "sig2", "blockTime": NOW - 5 * DAY, "err": {"InstructionError": [0, "Custom"]}},
            {"signature": "sig1", "blockTime": NOW - 10 * DAY, "err": None},
        ]
        record = normalize_transactions(_rpc(getSignaturesForAddress=sigs), now=NOW)

        assert record.total_count == 3
        assert record.first_seen_ts == NOW - 10 * DAY
        assert record.last_seen_ts == NOW - DAY
        assert record.account_age_days == 10
        assert record.first_seen_date == "2023-11-04"
        assert [t.status for t in record.recent_list] == ["success", "failed", "success"]
        assert record.recent_list[0].date == "2023-11-13 22:13:20"

    def test_recent_list_capped(self) -> None:
        sigs = [{"signature": f"s{i}", "blockTime": NOW - i} for i in range(8)]
        record = normalize_transactions(_rpc(getSignaturesForAddress=sigs), now=NOW)
        assert len(record.recent_list) == 5
        assert record.total_count == 8

    def test_no_history(self) -> None:
        record = normalize_transactions(_rpc(getSignaturesForAddress=[]), now=NOW)
        assert record.available is True
        assert record.total_count == 0
        assert record.first_seen_date == UNKNOWN
        assert record.account_age_days == 0

    def test_missing_block_time(self) -> None:
        sigs = [{"signature": "s1", "blockTime": None}]
        record = normalize_transactions(_rpc(getSignaturesForAddress=sigs), now=NOW)
        assert record.first_seen_ts == 0
        assert record.first_seen_date == UNKNOWN
        assert record.recent_list[0].date == UNKNOWN


class TestNormalizeAccount:
    def test_token_mint(self) -> None:
        value = {
            "owner": TOKEN_PROGRAM_ID,
            "executable": False,
            "lamports": 1_461_600,
            "rentEpoch": 361,
            "space": 82,
            "data": {
                "parsed": {
                    "type": "mint",
                    "info": {
                        "decimals": 6,
                        "supply": "1000000000000",
                        "mintAuthority": None,
                        "freezeAuthority": "FreezeAuth1111",
                    },
                },
                "program": "spl-token",
            },
        }
        record = normalize_account(_rpc(getAccountInfo={"value": value}))

        assert record.is_token is True
        assert record.account_type == "Token Mint"
        assert record.program_name == "SPL Token Program"
        assert record.decimals == 6
        assert record.supply == 1_000_000.0
        assert record.mint_authority == NOT_FOUND
        assert record.freeze_authority == "FreezeAuth1111"
        assert record.data_size == 82

    def test_system_wallet(self) -> None:
        value = {
            "owner": "11111111111111111111111111111111",
            "executable": False,
            "lamports": 5_000_000,
            "rentEpoch": 0,
            "data": ["", "base64"],
        }
        record = normalize_account(_rpc(getAccountInfo={"value": value}))

        assert record.exists is True
        assert record.is_token is False
        assert record.account_type == "System Account"
        assert record.mint_authority == UNKNOWN
        assert record.data_size == 0

    def test_program_account_size_from_base64(self) -> None:
        value = {
            "owner": "BPFLoaderUpgradeab1e11111111111111111111111",
            "executable": True,
            "data": [base64.b64encode(b"\x00" * 36).decode(), "base64"],
        }
        record = normalize_account(_rpc(getAccountInfo={"value": value}))
        assert record.account_type == "Program"
        assert record.data_size == 36

    def test_uninitialized_account(self) -> None:
        record = normalize_account(_rpc(getAccountInfo={"value": None}))
        assert record.available is True
        assert record.exists is False
        assert record.account_type == "Not initialized"


def _rpc_with_error(method: str, message: str, **results) -> UpstreamResponse:
    resp = _rpc(**results)
    resp.payload[method] = {"error": {"code": -32602, "message": message}}
    return resp


class TestMalformedPayload:
    def test_mint_info_not_an_object(self) -> None:
        value = {"owner": TOKEN_PROGRAM_ID, "data": {"parsed": {"type": "mint", "info": "garbage"}}}
        record = normalize_account(_rpc(getAccountInfo={"value": value}))
        assert record.is_token is True
        assert record.decimals == 0
        assert record.supply == 0.0
        assert record.mint_authority == NOT_FOUND

    def test_non_string_fields_fall_back(self) -> None:
        value = {
            "owner": 42,
            "data": {"parsed": {"type": "mint", "info": {"decimals": 9999, "mintAuthority": ["x"]}}},
        }
        record = normalize_account(_rpc(getAccountInfo={"value": value}))
        assert record.owner == UNKNOWN
        assert record.program_name == UNKNOWN
        assert record.decimals == 255
        assert record.mint_authority == NOT_FOUND

    def test_signature_not_a_string(self) -> None:
        sigs = [{"signature": 123, "blockTime": NOW - DAY}]
        record = normalize_transactions(_rpc(getSignaturesForAddress=sigs), now=NOW)
        assert record.available is True
        assert record.recent_list[0].signature == UNKNOWN

    def test_token_mint_not_a_string(self) -> None:
        account = _token_account(MINT, "100", 2, 1.0)
        account["account"]["data"]["parsed"]["info"]["mint"] = {"nested": True}
        record = normalize_balance(_rpc(getBalance={"value": 0}, getTokenAccountsByOwner={"value": [account]}))
        assert record.tokens[0].mint == UNKNOWN


class TestPartialBatch:
    def test_failed_method_marks_only_its_record(self) -> None:
        resp = _rpc_with_error(
            "getSignaturesForAddress",
            "long-term storage unavailable",
            getBalance={"value": 1_000_000_000},
            getTokenAccountsByOwner={"value": []},
            getProgramAccounts=[],
            getAccountInfo={"value": None},
        )

        txs = normalize_transactions(resp, now=NOW)
        balance = normalize_balance(resp)
        account = normalize_account(resp)

        assert txs.available is False
        assert txs.error == "request_failed: rpc getSignaturesForAddress: long-term storage unavailable"
        assert txs.total_count == 0
        assert balance.available is True
        assert balance.sol_balance == 1.0
        assert account.available is True

    def test_any_balance_method_fails_balance(self) -> None:
        resp = _rpc_with_error("getProgramAccounts", "too many accounts", getBalance={"value": 5})
        record = normalize_balance(resp)
        assert record.available is False
        assert record.error.startswith("request_failed: rpc getProgramAccounts")

    def test_account_error(self) -> None:
        record = normalize_account(_rpc_with_error("getAccountInfo", "invalid param"))
        assert record.available is False
        assert record.exists is False
        assert record.error == "request_failed: rpc getAccountInfo: invalid param"

    def test_batch_errors(self) -> None:
        resp = _rpc_with_error("getBalance", "")
        resp.payload["getAccountInfo"] = {"error": "plain text"}
        assert batch_errors(resp.payload) == {"getAccountInfo": "plain text", "getBalance": "unknown error"}
        assert batch_errors(_rpc().payload) == {}

    @pytest.mark.asyncio
    async def test_partial_batch_not_cached(self, client_kwargs) -> None:
        client = RpcClient("https://rpc.example.com", **client_kwargs)
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.json.return_value = [
            {"jsonrpc": "2.0", "id": 1, "result": {"value": None}},
            {"jsonrpc": "2.0", "id": 2, "result": {"value": 0}},
            {"jsonrpc": "2.0", "id": 3, "result": {"value": []}},
            {"jsonrpc": "2.0", "id": 4, "error": {"code": -32019, "message": "unavailable"}},
            {"jsonrpc": "2.0", "id": 5, "result": []},
        ]
        client._client = AsyncMock()
        client._client.post = AsyncMock(return_value=mock_resp)

        first = await client.fetch(WALLET)
        second = await client.fetch(WALLET)

        assert first.success is True
        assert second.cached is False
        assert client._client.post.await_count == 2

    @pytest.mark.asyncio
    async def test_clean_batch_cached(self, client_kwargs) -> None:
        client = RpcClient("https://rpc.example.com", **client_kwargs)
        mock_resp = MagicMock()
        mock_resp.status_code = 200
        mock_resp.json.return_value = [
            {"jsonrpc": "2.0", "id": i + 1, "result": None} for i in range(len(BATCH_METHODS))
        ]
        client._client = AsyncMock()
        client._client.post = AsyncMock(return_value=mock_resp)

        await client.fetch(WALLET)
        second = await client.fetch(WALLET)

        assert second.cached is True
        assert client._client.post.await_count == 1
