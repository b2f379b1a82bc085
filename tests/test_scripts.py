"""Tests for the command line scripts."""

import importlib.util
import json
from pathlib import Path

SCRIPTS_DIR = Path(__file__).resolve().parents[1] / "scripts"


def _load(name):
    module_spec = importlib.util.spec_from_file_location(name, SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def test_check_registration_prints_status(monkeypatch, capsys, chain, account):
    script = _load("check_registration")
    agent_id = chain.seed_agent(account.address)
    monkeypatch.setattr(script.PublicClient, "from_rpc_url", lambda *args, **kwargs: chain)
    monkeypatch.setattr("sys.argv", ["check_registration.py", account.address])

    assert script.main() == 0

    output = json.loads(capsys.readouterr().out)
    assert output["isRegistered"] is True
    assert output["agentInfo"]["agentId"] == agent_id


def test_check_registration_flags_absorbed_fault(monkeypatch, capsys, chain, account):
    script = _load("check_registration")
    chain.read_error = ConnectionError("rpc down")
    monkeypatch.setattr(script.PublicClient, "from_rpc_url", lambda *args, **kwargs: chain)
    monkeypatch.setattr("sys.argv", ["check_registration.py", account.address])

    assert script.main() == 2
    assert "rpc down" in capsys.readouterr().err


def test_register_agent_requires_private_key(monkeypatch, capsys):
    script = _load("register_agent")
    monkeypatch.delenv("ERC8004_PRIVATE_KEY", raising=False)
    monkeypatch.setattr(script, "load_dotenv", lambda: None)
    monkeypatch.setattr("sys.argv", ["register_agent.py", "MyAgent"])

    assert script.main() == 1
    assert "ERC8004_PRIVATE_KEY" in capsys.readouterr().err


def test_register_agent_registers_with_stake(monkeypatch, capsys, chain, account):
    script = _load("register_agent")
    monkeypatch.setenv("ERC8004_PRIVATE_KEY", "0x" + "01" * 32)
    monkeypatch.setattr(script.WalletClient, "from_private_key", lambda *args, **kwargs: chain)
    monkeypatch.setattr(
        "sys.argv",
        ["register_agent.py", "MyAgent", "--capability", "web-search", "--stake", "500"],
    )

    assert script.main() == 0

    agent_id = chain.owners[account.address]
    assert chain.agents[agent_id]["capabilities"] == ["web-search"]
    assert chain.agents[agent_id]["stake"] == 500
    assert f"Agent ID: {agent_id}" in capsys.readouterr().out
