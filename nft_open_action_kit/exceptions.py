"""
Custom Exception Classes

This module defines the exceptions raised while resolving a marketplace URL
into purchase terms and open action data. Every resolution failure surfaces
as one of these so callers can tell the failure kinds apart.
"""

from typing import Optional


class NFTKitBaseException(Exception):
    """Base exception for the NFT open action kit."""

    pass


class ConfigurationError(NFTKitBaseException):
    """Raised for configuration problems."""

    pass


class UnsupportedPlatform(NFTKitBaseException):
    """Raised when no registered platform matches a URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Platform not supported for URL: {url}")


class MalformedReference(NFTKitBaseException):
    """Raised when a URL matched a platform but no NFT could be extracted from it."""

    def __init__(self, url: str, platform: str, message: Optional[str] = None):
        self.url = url
        self.platform = platform
        details = f"Malformed {platform} NFT reference: {url}"
        if message:
            super().__init__(f"{message} - Details: {details}")
        else:
            super().__init__(details)


class SaleError(NFTKitBaseException):
    """Base class for sale lookups that produced nothing purchasable."""

    def __init__(self, contract_address: str, token_id: int, message: str):
        self.contract_address = contract_address
        self.token_id = token_id
        super().__init__(f"{message} ({contract_address} #{token_id})")


class SaleNotFound(SaleError):
    """Raised when no valid sale exists for the requested quantity."""

    def __init__(self, contract_address: str, token_id: int):
        super().__init__(contract_address, token_id, "No valid sale")


class SaleInvalid(SaleError):
    """Raised when the NFT is not currently purchasable."""

    def __init__(self, contract_address: str, token_id: int):
        super().__init__(contract_address, token_id, "Not currently purchasable")


class MetadataFetchFailed(NFTKitBaseException):
    """Raised when token metadata is unreachable or not valid JSON."""

    def __init__(self, uri: str, original_error: Optional[Exception] = None):
        self.uri = uri
        self.original_error = original_error
        details = f"Token metadata could not be fetched from {uri}"
        if original_error:
            super().__init__(f"{details}: {original_error}")
        else:
            super().__init__(details)


class MetadataIncomplete(NFTKitBaseException):
    """Raised when token metadata lacks a required field."""

    def __init__(self, uri: str, field_name: str):
        self.uri = uri
        self.field_name = field_name
        super().__init__(f"Token metadata at {uri} has no '{field_name}'")


class ChainReadFailed(NFTKitBaseException):
    """Raised when a contract view call fails."""

    def __init__(
        self,
        contract_address: str,
        function_name: str,
        original_error: Exception,
        chain_id: Optional[int] = None,
    ):
        self.contract_address = contract_address
        self.function_name = function_name
        self.original_error = original_error
        self.chain_id = chain_id
        super().__init__(
            f"Error reading '{function_name}' on {contract_address} "
            f"(chain {chain_id}): {original_error}"
        )
