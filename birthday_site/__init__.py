"""Birthday site server: configuration API and a server-driven presentation engine."""

__version__ = "0.1.0"
