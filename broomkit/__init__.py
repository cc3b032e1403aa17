"""Asset tools for a 2D shooter: LAG image packs, image editing, wave packs, map events, config and HUD logic."""

__version__ = "0.1.0"

__all__ = ["config", "graphic", "hud", "lag", "lagutil", "mapconv", "naming", "wavepack"]