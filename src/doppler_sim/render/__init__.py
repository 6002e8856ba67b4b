"""Rendering adapter: pure-data frames for external renderers."""

from doppler_sim.render.frames import (
    LAMP_OFF,
    LAMP_OK,
    LAMP_OVERLOAD,
    Frame,
    FrameBuilder,
    WaveformTrace,
    circle_angles,
    format_readout,
    lamp_color,
    wavefront_circles,
)

__all__ = [
    "Frame",
    "FrameBuilder",
    "WaveformTrace",
    "circle_angles",
    "wavefront_circles",
    "format_readout",
    "lamp_color",
    "LAMP_OFF",
    "LAMP_OK",
    "LAMP_OVERLOAD",
]
