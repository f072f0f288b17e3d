"""Custom errors for the comptroller model"""

class ProtocolError(Exception):
    """Base error class for protocol errors"""
    pass

class RangeError(ProtocolError):
    """Error for a value leaving its fixed width domain (overflow/underflow)"""
    pass

class NotListedError(ProtocolError):
    """Error for an operation that references an unlisted market"""
    pass

class AlreadyListedError(ProtocolError):
    """Error for listing a market twice"""
    pass

class PausedError(ProtocolError):
    """Error for an administratively paused action"""

    def __init__(self, market: str, action) -> None:
        super().__init__(f"{action.value} is paused for market {market}")
        self.market = market
        self.action = action

class InsufficientLiquidityError(ProtocolError):
    """Error for an action that would leave the account with a shortfall"""

    def __init__(self, account: str, shortfall: int) -> None:
        super().__init__(f"Insufficient liquidity for {account}: shortfall {shortfall}")
        self.account = account
        self.shortfall = shortfall

class PriceError(ProtocolError):
    """Error for missing oracle price data"""
    pass

class InvalidParameterError(ProtocolError):
    """Error for out of bounds admin parameters or negative amounts"""
    pass

class CapExceededError(ProtocolError):
    """Error for exceeding a market supply or borrow cap"""
    pass

class UnauthorizedError(ProtocolError):
    """Error for callers denied by the access gate"""
    pass
