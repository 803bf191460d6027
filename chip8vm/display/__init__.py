"""Display state for the CHIP-8 virtual machine."""

from .framebuffer import Framebuffer, FramebufferSnapshot

__all__ = ["Framebuffer", "FramebufferSnapshot"]
