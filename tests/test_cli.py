"""
Tests for the command line interface.
"""
import functools
import json

import pytest
from click.testing import CliRunner

from connector.local_ledger import LocalWallet
from main import cli


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.setenv("MINT_CONFIRMATION_POLL_INTERVAL", "0")
    return CliRunner()


@pytest.fixture
def state_file(tmp_path):
    return str(tmp_path / "ledger.json")


def test_translate(runner):
    result = runner.invoke(cli, ["translate", "CELO"])
    assert result.exit_code == 0
    assert result.output.strip() == "💚🌳💰🌟"


def test_contract_info_fresh_ledger(runner, state_file):
    result = runner.invoke(cli, ["contract-info", "--state-file", state_file])
    assert result.exit_code == 0
    assert "0.001 CELO" in result.output
    assert "Minted: 0 / 10000" in result.output


def test_mint_then_gallery(runner, state_file):
    result = runner.invoke(cli, ["mint", "hello celo", "--state-file", state_file])

    assert result.exit_code == 0, result.output
    assert "Token: #0" in result.output
    assert "Success" in result.output
    with open(state_file, "r", encoding="utf-8") as f:
        assert len(json.load(f)["tokens"]) == 1

    result = runner.invoke(cli, ["gallery", "--state-file", state_file])
    assert result.exit_code == 0
    assert '"hello celo"' in result.output

    result = runner.invoke(cli, ["contract-info", "--state-file", state_file])
    assert "Minted: 1 / 10000" in result.output


def test_mint_without_storage_fails(runner, state_file, monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "ipfs")
    monkeypatch.setenv("IPFS_API_URL", "")

    result = runner.invoke(cli, ["mint", "gm", "--state-file", state_file])

    assert result.exit_code == 1
    assert "Storage upload is not configured" in result.output


def test_gallery_empty(runner, state_file):
    result = runner.invoke(cli, ["gallery", "--state-file", state_file])
    assert result.exit_code == 0
    assert "No emoji NFTs yet" in result.output


def test_invalid_config(runner, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("storage:\n  backend: s3\n", encoding="utf-8")

    result = runner.invoke(cli, ["--config", str(path), "translate", "gm"])

    assert result.exit_code != 0
    assert "Invalid configuration" in result.output


def test_mint_timeout_reports_unknown_status(runner, state_file, monkeypatch):
    monkeypatch.setenv("MINT_CONFIRMATION_ATTEMPTS", "2")
    monkeypatch.setattr("main.LocalWallet", functools.partial(LocalWallet, pending_polls=5))

    result = runner.invoke(cli, ["mint", "gm", "--state-file", state_file])

    assert result.exit_code == 1
    assert "Mint status unknown, check explorer" in result.output
    assert "Mint failed" not in result.output
    assert "⏳ Unknown" in result.output


def test_mint_help_names_the_emulator(runner):
    result = runner.invoke(cli, ["mint", "--help"])
    assert result.exit_code == 0
    assert "local ledger emulator" in result.output
    assert "never reach Celo" in result.output
