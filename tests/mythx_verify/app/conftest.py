"""Shared fixtures for app-level tests."""
import json

import pytest
from dependency_injector import providers

from fakes import FakeService, finding, solc_contract, solc_output
from mythx_verify.app.config import AppConfig, DirectoryConfig, ServiceConfig
from mythx_verify.app.container import Container
from mythx_verify.core.domain.models import IssueReport, RecentAnalysis


TOKEN_SOURCE = "contract Token {\n  uint total;\n}\n"
VAULT_SOURCE = "contract Vault {}\n"


@pytest.fixture
def test_config(tmp_path):
    """Create test configuration with explicit values."""
    return AppConfig(
        directories=DirectoryConfig(home=tmp_path),
        service=ServiceConfig(api_key="test-key"),
    )


@pytest.fixture
def fake_service():
    return FakeService(
        findings={"Token": [IssueReport(issues=(finding("18:10:0", severity="High", head="Integer overflow"),))]},
        recent=[RecentAnalysis("u-1", "quick", "Token.sol", {"high": 1}, "2024-01-01T00:00:00Z")],
    )


@pytest.fixture
def mock_container(fake_service, monkeypatch):
    """Patch the facade's container so the MythX service is the in-memory fake."""
    def create_mock_container():
        c = Container()
        c.service.override(providers.Object(fake_service))
        return c

    monkeypatch.setattr("mythx_verify.app.main.Container", create_mock_container)
    return fake_service


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point env-loaded configuration at a temporary home."""
    monkeypatch.setenv("MYTHX_VERIFY_DIRECTORIES__HOME", str(tmp_path))
    monkeypatch.setenv("MYTHX_VERIFY_SERVICE__API_KEY", "test-key")
    return tmp_path


@pytest.fixture
def compilation(tmp_path):
    """Write a solc standard-JSON output/input pair with Token.sol and Vault.sol."""
    output = solc_output(
        {
            "Token.sol": {"Token": solc_contract(sources=("Token.sol",))},
            "Vault.sol": {"Vault": solc_contract(sources=("Vault.sol",))},
        },
        ["Token.sol", "Vault.sol"],
    )
    std_input = {
        "language": "Solidity",
        "sources": {"Token.sol": {"content": TOKEN_SOURCE}, "Vault.sol": {"content": VAULT_SOURCE}},
    }
    output_path = tmp_path / "solc-output.json"
    input_path = tmp_path / "solc-input.json"
    output_path.write_text(json.dumps(output), encoding="utf-8")
    input_path.write_text(json.dumps(std_input), encoding="utf-8")
    return output_path, input_path
