"""
Tensor module: factor tables over variable sets.
"""

from daibp.tensor.factor import Factor, dist_linf, kl_dist

__all__ = [
    "Factor",
    "dist_linf",
    "kl_dist",
]
