"""Register an agent on the ERC-8004 registry using ERC8004_* settings."""

from __future__ import annotations

import argparse
import asyncio
import sys

from dotenv import load_dotenv

from erc8004_agent.chain import WalletClient
from erc8004_agent.constants import DEFAULT_CAPABILITIES, DEFAULT_STAKE_AMOUNT
from erc8004_agent.errors import RegistryError
from erc8004_agent.models import AgentMetadata
from erc8004_agent.registry import AgentRegistry
from erc8004_agent.settings import RegistrySettings


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Register an agent on the ERC-8004 registry")
    parser.add_argument("name", help="Agent display name")
    parser.add_argument("--version", default="1.0.0", help="Agent version string")
    parser.add_argument(
        "--capability",
        action="append",
        dest="capabilities",
        help="Capability tag (repeatable)",
    )
    parser.add_argument(
        "--stake",
        type=int,
        default=DEFAULT_STAKE_AMOUNT,
        help="Initial stake in wei",
    )
    return parser.parse_args()


async def _register(args: argparse.Namespace) -> int:
    settings = RegistrySettings()
    if not settings.private_key:
        print("ERC8004_PRIVATE_KEY is not set", file=sys.stderr)
        return 1

    rpc_url = settings.effective_rpc_url()
    wallet = WalletClient.from_private_key(
        rpc_url, settings.private_key, receipt_timeout=settings.receipt_timeout
    )
    registry = AgentRegistry(
        wallet,
        wallet,
        network=settings.network,
        owner_address=wallet.address,
        registry_address=settings.registry_address,
    )

    status = await registry.refresh()
    if status is not None and status.is_registered:
        print(f"{wallet.address} already owns agent {registry.agent_id}")
        return 0

    metadata = AgentMetadata(
        name=args.name,
        version=args.version,
        capabilities=args.capabilities or list(DEFAULT_CAPABILITIES),
    )
    print(f"Registering {metadata.name} v{metadata.version} on {settings.network}...")
    result = await registry.register(metadata, stake_amount=args.stake)
    print(f"Transaction: {result.tx_hash}")
    print(f"Agent ID: {result.agent_id or registry.agent_id or 'unknown'}")
    return 0


def main() -> int:
    load_dotenv()
    args = parse_args()
    try:
        return asyncio.run(_register(args))
    except RegistryError as exc:
        print(f"Registration failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
