# Area: Shared
"""
rankify_sdk.cli — Command-line interface
========================================

Offline helpers around the SDK core, plus one indexer-backed command.

Usage:
    python -m rankify_sdk phase --state state.json
    python -m rankify_sdk reconstruct --input turn.json
    python -m rankify_sdk derive-key --secret 0x... --game-id 1 --turn 2
    python -m rankify_sdk shared-key --private-key 0x... --public-key 0x... --game-id 1 --turn 2
    python -m rankify_sdk turn --game-id 1 --turn 2 --vote-credits 16

Contract address and chain id come from --contract / --chain-id or from
config (RANKIFY_INSTANCE_ADDRESS / CHAIN_ID).
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ._shared.logging_config import log_sdk_error, setup_logging
from .config import load_config, validate_config
from .errors import RankifySDKError
from .events import GameState, parse_event
from .game import GameStateSource, get_historic_turn
from .indexer import IndexerEventSource
from .keys import derive_key, derive_shared_key
from .phase import classify_game_phase
from .reconstruction import reconstruct_turn


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="rankify-sdk",
        description="Rankify SDK - permutations, turn keys and turn reconstruction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rankify-sdk phase --state state.json
  rankify-sdk reconstruct --input turn.json
  rankify-sdk shared-key --private-key 0x... --public-key 0x... --game-id 1 --turn 2
  INDEXER_URL=https://indexer/v1/graphql rankify-sdk turn --game-id 1 --turn 2 --vote-credits 16
        """,
    )
    parser.add_argument("--config", type=str, help="Path to JSON config file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)

    phase = commands.add_parser("phase", help="Classify a game state read")
    phase.add_argument("--state", required=True, help="JSON file with a game state")

    reconstruct = commands.add_parser("reconstruct", help="Reconstruct a turn from a JSON dump")
    reconstruct.add_argument(
        "--input", required=True,
        help="JSON file with proposals, votes, permutation, vote_credits and optional players",
    )

    for name, help_text in (
        ("derive-key", "Derive a scoped key from a 32-byte secret"),
        ("shared-key", "Derive the player/game master shared key"),
        ("turn", "Reconstruct a turn from indexed events"),
    ):
        sub = commands.add_parser(name, help=help_text)
        sub.add_argument("--game-id", type=int, required=True)
        sub.add_argument("--turn", type=int, required=True)
        sub.add_argument("--contract", type=str, help="Instance contract address")
        sub.add_argument("--chain-id", type=int, help="Chain id")
        if name == "derive-key":
            sub.add_argument("--secret", required=True, help="32-byte hex secret")
            sub.add_argument("--scope", default="default", help="Domain separation scope")
        elif name == "shared-key":
            sub.add_argument("--private-key", required=True, help="Own private key (hex)")
            sub.add_argument("--public-key", required=True, help="Other party's public key (hex)")
        else:
            sub.add_argument("--vote-credits", type=int, required=True)

    return parser.parse_args(argv)


def _read_json(path: str) -> Dict[str, Any]:
    with open(Path(path), encoding="utf-8") as f:
        return json.load(f)


def _instance(args: argparse.Namespace, config: Dict[str, Any]) -> Dict[str, Any]:
    """Merge --contract / --chain-id over config and validate."""
    if args.contract:
        config["contract_address"] = args.contract
    if args.chain_id is not None:
        config["chain_id"] = args.chain_id
    validate_config(config)
    return config


def run_command(args: argparse.Namespace, config: Dict[str, Any]) -> Any:
    """Execute one subcommand and return its JSON-serializable output."""
    if args.command == "phase":
        state = parse_event(GameState, _read_json(args.state), source=args.state)
        phase = classify_game_phase(state.phase_flags())
        return {"phase": phase.value, "display": phase.display}

    if args.command == "reconstruct":
        dump = _read_json(args.input)
        return reconstruct_turn(
            proposals=dump["proposals"],
            votes=dump["votes"],
            permutation=dump["permutation"],
            vote_credits=dump["vote_credits"],
            players=dump.get("players"),
            block_timestamp=dump.get("block_timestamp"),
        )

    instance = _instance(args, config)

    if args.command == "derive-key":
        key = derive_key(
            args.secret, args.game_id, args.turn,
            instance["contract_address"], instance["chain_id"], args.scope,
        )
        return {"key": "0x" + key.hex()}

    if args.command == "shared-key":
        key = derive_shared_key(
            args.private_key, args.public_key, args.game_id, args.turn,
            instance["contract_address"], instance["chain_id"],
        )
        return {"key": "0x" + key.hex()}

    source = GameStateSource(
        events=IndexerEventSource.from_config(instance),
        state=None,
        contract_address=instance["contract_address"],
        chain_id=instance["chain_id"],
    )
    return get_historic_turn(source, args.game_id, args.turn, vote_credits=args.vote_credits)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(
        log_file_path=config.get("log_file"),
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    try:
        output = run_command(args, config)
    except RankifySDKError as e:
        log_sdk_error(e)
        return 1
    except (KeyError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2))
    return 0
