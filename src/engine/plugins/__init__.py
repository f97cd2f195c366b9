"""Server plugin contract.

Plugins extend PluginInterface and are handed a PluginContext carrying
the hook bus, the live world and the asset manifest.
"""

from engine.plugins.base import (
    AssetManifest,
    LiveInstance,
    PluginContext,
    PluginInterface,
    World,
)

__all__ = [
    "AssetManifest",
    "LiveInstance",
    "PluginContext",
    "PluginInterface",
    "World",
]
