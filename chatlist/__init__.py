"""Client-side chat list: windowed fetch, merge, date buckets and cache."""

__version__ = "0.1.0"
