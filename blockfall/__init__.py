"""A falling-block puzzle game: display-independent board and piece logic plus a pygame loop."""

__version__ = "0.1.0"