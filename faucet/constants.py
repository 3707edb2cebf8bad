"""
The Faucet Constants

All faucet constants defined here for single source of truth.
"""

from typing import Final

# ==============================================================================
# ADDRESSES
# ==============================================================================

ADDRESS_SIZE: Final[int] = 20                   # Bytes in an account address
WORD_SIZE: Final[int] = 32                      # ABI word size in bytes

# ==============================================================================
# ROLES AND FEATURES
# ==============================================================================

ROLE_BITS: Final[int] = 256                     # Width of a capability bitmask

# Bitmask representing all the possible permissions (super admin role)
FULL_PRIVILEGES_MASK: Final[int] = (1 << ROLE_BITS) - 1

# Access manager assigns roles to users and features to the faucet itself
ROLE_ACCESS_MANAGER: Final[int] = 1 << 255

# Upgrade manager is responsible for upgrades (kept for bitmask compatibility)
ROLE_UPGRADE_MANAGER: Final[int] = 1 << 254

# Faucet user is allowed to get value via the faucet and to proxy mint requests
ROLE_FAUCET_USER: Final[int] = 0x0001_0000

# Faucet manager is responsible for faucet configuration and managing users
ROLE_FAUCET_MANAGER: Final[int] = 0x0002_0000

# Features the faucet needs to run addUsers/removeUsers on its own authority
FEATURES_USER_MANAGEMENT: Final[int] = ROLE_ACCESS_MANAGER | ROLE_FAUCET_USER

# ==============================================================================
# EPOCH THROTTLING
# ==============================================================================

UNIT: Final[int] = 10 ** 18                     # Base amounts per whole unit

DEFAULT_EPOCH_LENGTH_SEC: Final[int] = 86400    # 1 day
DEFAULT_LIMIT_PER_EPOCH: Final[int] = 10 * UNIT  # 10 units per epoch

# ==============================================================================
# MINT PROXY
# ==============================================================================

MINT_SIGNATURE: Final[str] = "mint(address,uint256)"
MINT_GAS_LIMIT: Final[int] = 81_000             # Gas forwarded to the target
MINT_VALUE_BITS: Final[int] = 192               # Values must fit into uint192
MINT_VALUE_CEILING: Final[int] = 1 << MINT_VALUE_BITS

# ==============================================================================
# HOST
# ==============================================================================

UINT256_MAX: Final[int] = (1 << 256) - 1
DEFAULT_CALL_GAS: Final[int] = 10_000_000       # Gas for top-level calls

# Gas charged by the bundled mintable mocks
MINTABLE_NOOP_GAS: Final[int] = 25_000
