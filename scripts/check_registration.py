"""Print the ERC-8004 registration status of an owner address as JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from dotenv import load_dotenv

from erc8004_agent.chain import PublicClient
from erc8004_agent.constants import SUPPORTED_NETWORKS
from erc8004_agent.errors import RegistryError
from erc8004_agent.registry import check_registration
from erc8004_agent.settings import RegistrySettings


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check whether an address owns a registered agent")
    parser.add_argument("owner", help="Owner wallet address")
    parser.add_argument(
        "--network",
        choices=SUPPORTED_NETWORKS,
        help="Network name (defaults to ERC8004_NETWORK)",
    )
    parser.add_argument("--registry", help="Registry contract override")
    parser.add_argument("--rpc-url", help="RPC endpoint override")
    return parser.parse_args()


async def _check(args: argparse.Namespace) -> int:
    settings = RegistrySettings()
    network = args.network or settings.network
    rpc_url = args.rpc_url or settings.effective_rpc_url()
    client = PublicClient.from_rpc_url(rpc_url, receipt_timeout=settings.receipt_timeout)

    faults = []
    status = await check_registration(
        client,
        network,
        args.owner,
        args.registry or settings.registry_address,
        on_fault=faults.append,
    )
    print(json.dumps(status.to_dict(), indent=2))
    if faults:
        print(f"Warning: {faults[-1]}", file=sys.stderr)
        return 2
    return 0


def main() -> int:
    load_dotenv()
    args = parse_args()
    try:
        return asyncio.run(_check(args))
    except (RegistryError, ValueError) as exc:
        print(f"Registration check failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
