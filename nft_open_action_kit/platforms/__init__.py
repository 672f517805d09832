"""
Marketplace platform services.
"""

from .base import NFTPlatform, PlatformService, ServiceConfig
from .foundation import FoundationService
from .superrare import SuperRareService
from .zora import ZoraService

__all__ = [
    "NFTPlatform",
    "PlatformService",
    "ServiceConfig",
    "FoundationService",
    "SuperRareService",
    "ZoraService",
]
