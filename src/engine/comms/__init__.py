"""Host-side messaging: synchronous hooks and queued event fan-out."""

from engine.comms.hooks import HookBus

__all__ = ["HookBus"]
