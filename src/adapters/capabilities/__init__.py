from adapters.capabilities.loader import load_capabilities
from adapters.capabilities.models import CapabilityManifest, CapabilityServer

__all__ = [
    "CapabilityManifest",
    "CapabilityServer",
    "load_capabilities",
]
