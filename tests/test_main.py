"""Tests for system wiring and CLI output."""

from __future__ import annotations

from pathlib import Path

import pytest
from eth_abi import encode

from conftest import TX_HASH, WETH, FakeAllowanceManager, FakeQuoteClient, FakeResponse, FakeSession, FakeSigner
from swap_settlement.chain.rpc import JsonRpcClient
from swap_settlement.core.chains import SCROLL
from swap_settlement.core.config import Config
from swap_settlement.core.context import TradingContext
from swap_settlement.core.errors import ConfigError
from swap_settlement.execution.orchestrator import SettlementOrchestrator
from swap_settlement.main import SwapSettlementSystem, main


def make_system(account, tmp_path: Path, rpc_responses: list | None = None) -> SwapSettlementSystem:
    config = Config.from_dict(
        {
            "zero_ex": {"api_key": "zx-key"},
            "monitoring": {"journal_dir": str(tmp_path / "state"), "log_dir": str(tmp_path / "logs")},
        }
    )
    rpc = JsonRpcClient("https://rpc.example", session=FakeSession(rpc_responses or []))
    context = TradingContext(account=account, chain=SCROLL, rpc=rpc)
    return SwapSettlementSystem(config, context=context)


def decimals_response(decimals: int = 18) -> FakeResponse:
    return FakeResponse({"jsonrpc": "2.0", "id": 1, "result": "0x" + encode(["uint8"], [decimals]).hex()})


def test_build_intent_scales_amount_by_decimals(account, tmp_path: Path) -> None:
    system = make_system(account, tmp_path, [decimals_response(18)])

    intent = system.build_intent()

    assert intent.sell_token == WETH
    assert intent.buy_token == SCROLL.tokens["wstETH"]
    assert intent.sell_amount == 100_000_000_000_000_000
    assert intent.taker == account.address
    assert intent.affiliate_fee_bps == 100
    assert intent.collect_surplus is True


def test_settle_prints_hash_and_explorer_link(account, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    system = make_system(account, tmp_path, [decimals_response(18)])
    system.orchestrator = SettlementOrchestrator(FakeQuoteClient(), FakeAllowanceManager(), FakeSigner())

    result = system.settle()

    out = capsys.readouterr().out
    assert result.ok
    assert f"Swap transaction hash: {TX_HASH}" in out
    assert f"https://scrollscan.com/tx/{TX_HASH}" in out


def test_settle_names_failed_stage(account, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    system = make_system(account, tmp_path, [decimals_response(18)])
    system.orchestrator = SettlementOrchestrator(FakeQuoteClient(), FakeAllowanceManager(), FakeSigner(deny=True))

    result = system.settle()

    assert not result.ok
    assert "Settlement failed at SignatureDenied" in capsys.readouterr().out


def test_main_exits_on_missing_secrets(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.argv", ["swap-settlement"])
    monkeypatch.setattr("swap_settlement.main.setup_logging", lambda *args, **kwargs: None)

    with pytest.raises(SystemExit) as exc_info:
        main()

    assert exc_info.value.code == 1
    assert "PRIVATE_KEY environment variable required" in capsys.readouterr().out


def test_verify_chain_accepts_matching_node(account) -> None:
    session = FakeSession([FakeResponse({"jsonrpc": "2.0", "id": 1, "result": hex(SCROLL.chain_id)})])
    context = TradingContext(account=account, chain=SCROLL, rpc=JsonRpcClient("https://rpc.example", session=session))

    context.verify_chain()

    assert session.calls[0]["json"]["method"] == "eth_chainId"


def test_verify_chain_rejects_other_network(account) -> None:
    session = FakeSession([FakeResponse({"jsonrpc": "2.0", "id": 1, "result": "0x1"})])
    context = TradingContext(account=account, chain=SCROLL, rpc=JsonRpcClient("https://rpc.example", session=session))

    with pytest.raises(ConfigError, match="chain 1"):
        context.verify_chain()


def test_main_exits_cleanly_on_malformed_private_key(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.argv", ["swap-settlement"])
    monkeypatch.setattr("swap_settlement.main.setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setenv("PRIVATE_KEY", "not-a-key")
    monkeypatch.setenv("ZERO_EX_API_KEY", "zx-key")
    monkeypatch.setenv("ALCHEMY_HTTP_TRANSPORT_URL", "https://rpc.example")

    with pytest.raises(SystemExit) as exc_info:
        main()

    assert exc_info.value.code == 1
    assert "[ERROR] PRIVATE_KEY is not a valid private key" in capsys.readouterr().out
