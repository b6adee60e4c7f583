"""GoTrue adapters - HTTP implementation of the authentication provider port."""

from .client import GoTrueAuthGateway
from .http import create_gotrue_client, validate_base_url

__all__ = ["GoTrueAuthGateway", "create_gotrue_client", "validate_base_url"]
