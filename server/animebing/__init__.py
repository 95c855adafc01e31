"""AnimeBing catalog server and browsing client."""

__version__ = "1.0.0"
