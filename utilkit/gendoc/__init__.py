"""Generate a package function index for a README from exported signatures."""

from .assembly import PLACEHOLDER, GenerateResult, generate
from .collector import SignatureCollector, extract_signatures
from .config import GendocConfig, load_config
from .discovery import discover_files
from .errors import ConfigError, DiscoveryError, GendocError, ReadError, WriteError
from .fragments import FragmentLoader

__all__ = [
    "PLACEHOLDER",
    "ConfigError",
    "DiscoveryError",
    "FragmentLoader",
    "GendocConfig",
    "GendocError",
    "GenerateResult",
    "ReadError",
    "SignatureCollector",
    "WriteError",
    "discover_files",
    "extract_signatures",
    "generate",
    "load_config",
]
