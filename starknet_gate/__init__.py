"""Core package for Starknet Gate.

Links Discord members to Starknet wallets, revokes the wallet role when a
member disconnects, and serves token-gated wallet analytics per guild. The
data models and storage layer are re-exported here for convenience.
"""

__version__ = "0.1.0"

from .core.models import AccessToken, MembershipLink, ServerConfig
from .core.storage import JSONStorage, LinkRepository

__all__ = [
    "AccessToken",
    "JSONStorage",
    "LinkRepository",
    "MembershipLink",
    "ServerConfig",
    "__version__",
]
