from .base import BaseRenderer, HtmlMenuRenderer, JsonMenuRenderer

__all__ = ['BaseRenderer', 'HtmlMenuRenderer', 'JsonMenuRenderer']
