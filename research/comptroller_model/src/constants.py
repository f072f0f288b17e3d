# Fixed point scale factors
EXP_SCALE = 1_000_000_000_000_000_000  # 1e18 for mantissas (Exp)
DOUBLE_SCALE = EXP_SCALE * EXP_SCALE  # 1e36 for reward indices (Double)

# Fixed width domains
UINT32_MAX = 2**32 - 1  # block numbers
UINT224_MAX = 2**224 - 1  # reward indices
UINT256_MAX = 2**256 - 1  # everything else

# Reward constants
REWARD_INITIAL_INDEX = DOUBLE_SCALE  # 1.0 in Double scale

# Risk parameter bounds
COLLATERAL_FACTOR_MAX_MANTISSA = EXP_SCALE * 9 // 10  # 0.9
DEFAULT_COLLATERAL_FACTOR = 0  # markets list with no borrowing power

# Caps, 0 means unlimited
DEFAULT_BORROW_CAP = 0
DEFAULT_SUPPLY_CAP = 0
