"""
Centralized Configuration Management

Loads chain, Lens, metadata and platform settings from environment variables
and .env files. Each nested section carries its own environment prefix.
"""

from typing import Dict, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class ChainsConfig(BaseSettings):
    """RPC endpoints for the chains NFTs can live on."""

    model_config = SettingsConfigDict(env_prefix="CHAIN_")

    ethereum_rpc_url: Optional[str] = None
    base_rpc_url: Optional[str] = None
    optimism_rpc_url: Optional[str] = None
    zora_rpc_url: Optional[str] = None
    polygon_rpc_url: Optional[str] = None

    request_timeout: float = 30.0

    def rpc_urls(self) -> Dict[int, str]:
        """Map chain id to RPC URL for every configured chain."""
        by_chain = {
            1: self.ethereum_rpc_url,
            8453: self.base_rpc_url,
            10: self.optimism_rpc_url,
            7777777: self.zora_rpc_url,
            137: self.polygon_rpc_url,
        }
        return {chain_id: url for chain_id, url in by_chain.items() if url}


class LensConfig(BaseSettings):
    """Lens Protocol configuration."""

    model_config = SettingsConfigDict(env_prefix="LENS_")

    chain_id: int = 137
    open_action_module_address: Optional[str] = None


class MetadataConfig(BaseSettings):
    """Off-chain token metadata fetching."""

    model_config = SettingsConfigDict(env_prefix="METADATA_")

    ipfs_gateway_url: str = "https://ipfs.io/ipfs/"
    arweave_gateway_url: str = "https://arweave.net/"
    http_timeout: float = 15.0
    max_redirects: int = 5


class PlatformsConfig(BaseSettings):
    """Per-marketplace API keys and display overrides."""

    model_config = SettingsConfigDict(env_prefix="PLATFORM_")

    superrare_api_key: Optional[str] = None
    foundation_api_key: Optional[str] = None
    zora_api_key: Optional[str] = None

    superrare_logo_url: str = "https://superrare.com/favicon.ico"
    foundation_logo_url: str = "https://foundation.app/favicon.ico"
    zora_logo_url: str = "https://zora.co/favicon.ico"


class AppConfig(BaseSettings):
    """
    Application configuration with nested sections.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    log_level: str = "INFO"
    log_format: str = "text"
    log_file: Optional[str] = None

    # Nested configuration sections
    chains: ChainsConfig = ChainsConfig()
    lens: LensConfig = LensConfig()
    metadata: MetadataConfig = MetadataConfig()
    platforms: PlatformsConfig = PlatformsConfig()


# Global settings instance
def create_settings() -> AppConfig:
    """Create settings instance from environment variables and .env files only."""
    return AppConfig()


settings = create_settings()


def get_settings() -> AppConfig:
    """Get the global settings instance."""
    return settings
