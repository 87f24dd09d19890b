"""dirstamp - set each directory's mtime to match its newest immediate child."""

__version__ = "0.1.0"
