"""
NFT Open Action Kit - buy marketplace NFTs through Lens open actions.

This package provides:
- A registry of supported NFT marketplaces and their URL rules
- Platform services that read sale terms and metadata on-chain
- An assembler that turns a marketplace URL into complete open action data
"""

__version__ = "0.1.0"
