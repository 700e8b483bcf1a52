"""Error types raised by the renderer and its asset loaders."""
from __future__ import annotations


class RenderError(RuntimeError):
    """Base class for renderer failures."""


class SurfaceNotBoundError(RenderError):
    """The framebuffer was published before a presenter was bound."""

    def __init__(self) -> None:
        super().__init__(
            "Framebuffer has no presentation surface. "
            "Call bind_presenter() after the display has been created."
        )


class MeshLoadError(RenderError):
    """A mesh file is missing or malformed."""


class TextureLoadError(RenderError):
    """A bitmap could not be decoded."""


__all__ = ["MeshLoadError", "RenderError", "SurfaceNotBoundError", "TextureLoadError"]
