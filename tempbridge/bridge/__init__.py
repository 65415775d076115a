"""Bridge loop package for tempbridge."""

from .loop import ERROR_POLICY, BridgeLoop, ErrorPolicy

__all__ = ["BridgeLoop", "ErrorPolicy", "ERROR_POLICY"]
