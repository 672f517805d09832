"""
Command line entry point for the NFT open action kit.

Two commands are available:
1. resolve: build the open action data for a marketplace URL
2. detect: find a purchasable NFT in a Lens publication and print its init data

Results are printed to stdout as JSON; logs go to stderr.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from nft_open_action_kit.config import settings
from nft_open_action_kit.core.action_kit import NftOpenActionKit
from nft_open_action_kit.core.structures import ActionRequest
from nft_open_action_kit.exceptions import NFTKitBaseException
from nft_open_action_kit.platforms.base import ZERO_ADDRESS
from nft_open_action_kit.utils.logging_config import init_logging

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="nft_open_action_kit",
        description="Resolve NFT marketplace URLs into Lens open action data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m nft_open_action_kit resolve https://superrare.com/artwork-v2/dawn-42 --sender 0x...
  python -m nft_open_action_kit detect ipfs://Qm...
        """
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from configuration"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser("resolve", help="Build open action data for a marketplace URL")
    resolve.add_argument("url", help="Marketplace URL of the NFT")
    resolve.add_argument("--sender", required=True, help="Address paying for the NFT")
    resolve.add_argument("--profile-id", type=int, default=0, help="Profile that authored the publication")
    resolve.add_argument("--pub-id", type=int, default=0, help="Publication carrying the open action")
    resolve.add_argument("--actor-profile-id", type=int, default=0, help="Profile performing the action")
    resolve.add_argument(
        "--profile-owner",
        default=ZERO_ADDRESS,
        help="Owner of the publication's profile, used as referrer (default: zero address)"
    )
    resolve.add_argument("--quantity", type=positive_int, default=1, help="Number of copies (default: 1)")

    detect = subparsers.add_parser("detect", help="Detect a purchasable NFT in a publication")
    detect.add_argument("content_uri", help="URI of the Lens publication metadata")

    return parser.parse_args(argv)


async def run(args: argparse.Namespace, kit: Optional[NftOpenActionKit] = None) -> int:
    """Execute a parsed command and print its JSON result. Returns the exit code."""
    kit = kit or NftOpenActionKit(settings)
    try:
        if args.command == "resolve":
            request = ActionRequest(
                source_url=args.url,
                publication_acted_profile_id=args.profile_id,
                publication_acted_id=args.pub_id,
                actor_profile_id=args.actor_profile_id,
                sender_address=args.sender,
                profile_owner_address=args.profile_owner,
                quantity=args.quantity,
            )
            action_data = await kit.action_data_from_url(request)
            result = action_data.to_dict()
        else:
            init_data = await kit.detect_and_return_calldata(args.content_uri)
            result = {"init_data": init_data}
    except NFTKitBaseException as e:
        print(json.dumps({"error": type(e).__name__, "message": str(e)}))
        return 1
    finally:
        await kit.close()

    print(json.dumps(result, indent=2))
    return 0


async def main(argv: Optional[List[str]] = None) -> int:
    """Main application entry point."""
    args = parse_arguments(argv)
    init_logging(args.log_level)
    logger.debug(f"Running command {args.command}")
    return await run(args)


def cli() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
