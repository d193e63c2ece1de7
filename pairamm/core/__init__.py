"""
Core pair algorithms: pricing, liquidity and swap engines
"""

from .cpmm import (
    SwapQuote,
    amount_in_for_fixed_output,
    amount_out_for_fixed_input,
    gross_input_for_net,
    quote_fixed_input,
    quote_fixed_output,
)
from .errors import (
    AlreadyInitialized,
    InsufficientLiquidity,
    InvalidAmount,
    InvalidAsset,
    InvariantViolation,
    PairError,
    PoolNotInitialized,
    RatioMismatch,
    SlippageExceeded,
    TransferFailed,
    Unauthorized,
    UnknownTicket,
)
from .fees import FeeConfig, FeeSplit, split_fee
from .liquidity import (
    AddLiquidityResult,
    AddLiquiditySingleResult,
    AmountPair,
    RemoveLiquiditySingleResult,
    add_initial_liquidity,
    add_liquidity,
    add_liquidity_single,
    remove_liquidity,
    remove_liquidity_single,
)
from .swap import swap_fixed_input, swap_fixed_output

__all__ = [
    "SwapQuote",
    "amount_in_for_fixed_output",
    "amount_out_for_fixed_input",
    "gross_input_for_net",
    "quote_fixed_input",
    "quote_fixed_output",
    "AlreadyInitialized",
    "InsufficientLiquidity",
    "InvalidAmount",
    "InvalidAsset",
    "InvariantViolation",
    "PairError",
    "PoolNotInitialized",
    "RatioMismatch",
    "SlippageExceeded",
    "TransferFailed",
    "Unauthorized",
    "UnknownTicket",
    "FeeConfig",
    "FeeSplit",
    "split_fee",
    "AddLiquidityResult",
    "AddLiquiditySingleResult",
    "AmountPair",
    "RemoveLiquiditySingleResult",
    "add_initial_liquidity",
    "add_liquidity",
    "add_liquidity_single",
    "remove_liquidity",
    "remove_liquidity_single",
    "swap_fixed_input",
    "swap_fixed_output",
]
