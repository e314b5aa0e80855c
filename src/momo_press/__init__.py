"""MoMo Press - normalize mobile-money transaction exports for display."""

from momo_press.client import MoMoPressClient
from momo_press.models import NormalizedTransaction, RawTransaction
from momo_press.normalizer import TransactionNormalizer, normalize

__version__ = "0.1.0"
__all__ = [
    "MoMoPressClient",
    "NormalizedTransaction",
    "RawTransaction",
    "TransactionNormalizer",
    "normalize",
]
