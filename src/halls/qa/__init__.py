from .replay import ReplayHarness, ReplayTrace, world_checksum

__all__ = ["ReplayHarness", "ReplayTrace", "world_checksum"]
