"""Daily Viewer - a chronological view over dated notes."""
__version__ = "0.1.0"
