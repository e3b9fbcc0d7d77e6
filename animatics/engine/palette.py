"""Color and glow tokens shared by components and productions."""

from typing import Dict

from .sdk import GlowLevel

# Brick by Brick
CYAN = "#00d4ff"
CYAN_LIGHT = "#7ae8ff"
DARK = "#05070d"
DARK_BLUE = "#0a1628"
WHITE = "#ffffff"
WHITE_SUBTLE = "rgba(255, 255, 255, 0.6)"
DARK_VIGNETTE = "radial-gradient(ellipse at center, transparent 40%, rgba(0, 0, 0, 0.8) 100%)"

GLOW_SHADOWS: Dict[GlowLevel, str] = {
    GlowLevel.SUBTLE: "0 0 10px rgba(0, 212, 255, 0.3)",
    GlowLevel.MEDIUM: "0 0 20px rgba(0, 212, 255, 0.5)",
    GlowLevel.STRONG: "0 0 30px rgba(0, 212, 255, 0.7)",
    GlowLevel.INTENSE: "0 0 40px rgba(0, 212, 255, 0.9)",
}

GLOW_BACKDROP_OPACITY: Dict[GlowLevel, float] = {
    GlowLevel.SUBTLE: 0.2,
    GlowLevel.MEDIUM: 0.4,
    GlowLevel.STRONG: 0.6,
    GlowLevel.INTENSE: 0.8,
}

# BrandOS
PRIMARY = "#0047ff"
BACKGROUND = "#0a0a0a"
ACCENT_GLOW = "rgba(0, 71, 255, 0.4)"
TEXT = "#ffffff"
TEXT_MUTED = "#a0a0a0"
GLITCH_RED = "#ff0040"
GLITCH_CYAN = "#00ffff"

FONT_HEADING = "Helvetica Neue, Helvetica, Arial, sans-serif"
FONT_MONO = "'VCR OSD Mono', 'Courier New', monospace"
FONT_INTER = "'Inter', sans-serif"
