"""
Allow the kit to be executed as a module.

This enables running:
    python -m nft_open_action_kit resolve <url> --sender <address>
    python -m nft_open_action_kit detect <content-uri>
"""

import asyncio
import sys

from nft_open_action_kit.main import main

if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
