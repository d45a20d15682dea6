"""QueBar status core

Background synchronization engine for a minimal window-manager status bar.

This package provides:
- A self-healing WebSocket subscription client for GlazeWM workspace state
- A low-frequency battery sampler
- A coalesced repaint signal shared by all background producers
- A display state aggregator driven by the render loop

Author: NixOS Configuration
License: MIT
Version: 1.0.0
"""

__version__ = "1.0.0"
