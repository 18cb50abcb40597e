"""Link shortener service: create, resolve and delete short links."""

__version__ = "1.0.0"
