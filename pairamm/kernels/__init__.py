"""
Kernel layer.

`pairamm/kernels/python/` holds the integer-only pricing and liquidity kernels
the core engines delegate to.
"""
