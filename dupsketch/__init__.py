"""dupsketch - near-duplicate text detection with SuperMinHash signatures."""

__version__ = "0.1.0"

from .build_info import is_release_build
from .dedup import SuperMinHasherLSH
from .errors import ConfigError, DupSketchError, InvalidArgumentError
from .index.lsh import LSH, IndexStats
from .sketch.sketcher import SuperMinHasher
from .sketch.superminhash import SuperMinHash

__all__ = [
    "SuperMinHasher",
    "SuperMinHasherLSH",
    "SuperMinHash",
    "LSH",
    "IndexStats",
    "DupSketchError",
    "InvalidArgumentError",
    "ConfigError",
    "is_release_build",
    "__version__",
]
