"""pairamm: constant-product pricing and accounting for a two-asset pool."""

__version__ = "0.1.0"
