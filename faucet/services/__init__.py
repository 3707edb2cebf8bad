"""
The Faucet Services

- Withdrawal (direct value distribution)
- Mint proxy (bounded external mint calls)
- Bulk role management
- Admin configuration
"""

from faucet.services.withdrawal import WithdrawalService
from faucet.services.mint_proxy import MintProxyService
from faucet.services.roles import BulkRoleManager
from faucet.services.admin import AdminConfig

__all__ = [
    "WithdrawalService",
    "MintProxyService",
    "BulkRoleManager",
    "AdminConfig",
]
