"""gdoc-merge: copy a Google Doc template and fill it in with one batch update."""

__version__ = "0.1.0"
