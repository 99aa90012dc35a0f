from .rng import RNGBackend, RandomSource, RNG, get_rng, set_global_seed
from .logging_utils import configure_logging


__all__ = [
    "rng",
    "logging_utils",
    "RNG",
    "RNGBackend",
    "RandomSource",
    "get_rng",
    "set_global_seed",
    "configure_logging",
]
