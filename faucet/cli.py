"""
The Faucet Node

Deploys a faucet on an in-memory chain and serves JSON-RPC requests read
from stdin, one request per line, writing one response per line.

Usage:
    faucet-node                          # Default configuration
    faucet-node --config faucet.json     # Load configuration
    faucet-node --init-config faucet.json
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, TextIO

from faucet.api.methods import ERROR_PARSE, handle_request
from faucet.config import FaucetConfig, setup_logging
from faucet.contract import TheFaucet
from faucet.core.types import Address
from faucet.host.chain import Chain

logger = logging.getLogger(__name__)


def build_faucet(config: FaucetConfig) -> TheFaucet:
    """Create the chain and deploy a funded faucet as configured."""
    chain = Chain(clock=config.clock.build())
    deployer = Address.from_hex(config.deployer)

    faucet = TheFaucet.deploy(
        chain,
        deployer=deployer,
        config=config.epoch.to_epoch_config(),
        enable_user_management=config.enable_user_management,
    )

    if config.initial_pool:
        chain.mint_native(deployer, config.initial_pool)
        faucet.receive(deployer, config.initial_pool)

    return faucet


async def serve(faucet: TheFaucet, stream: TextIO, out: TextIO) -> int:
    """
    Answer requests until end of input.

    Returns:
        Number of requests handled
    """
    handled = 0
    for line in stream:
        line = line.strip()
        if not line:
            continue

        try:
            request = json.loads(line)
        except json.JSONDecodeError as e:
            response = {"jsonrpc": "2.0", "id": None, "error": {"code": ERROR_PARSE, "message": str(e)}}
        else:
            response = await handle_request(faucet, request)

        out.write(json.dumps(response) + "\n")
        out.flush()
        handled += 1

    return handled


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="The Faucet JSON-RPC node")
    parser.add_argument("--config", help="Path to JSON configuration")
    parser.add_argument("--init-config", metavar="PATH", help="Write default configuration and exit")
    parser.add_argument("--log-level", help="Override configured log level")
    args = parser.parse_args(argv)

    if args.init_config:
        FaucetConfig().save(args.init_config)
        print(f"Configuration written to {args.init_config}")
        return 0

    config = FaucetConfig.load(args.config) if args.config else FaucetConfig()
    if args.log_level:
        config.log.level = args.log_level

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"config error: {error}", file=sys.stderr)
        return 2

    setup_logging(config.log)

    faucet = build_faucet(config)
    logger.info(f"{config.name} serving faucet {faucet.address}")

    handled = asyncio.run(serve(faucet, sys.stdin, sys.stdout))
    logger.info(f"Handled {handled} request(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
