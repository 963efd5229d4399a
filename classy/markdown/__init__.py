from .renderer import classify_markdown

__all__ = ("classify_markdown",)
