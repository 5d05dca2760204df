"""
Chord blobs: tap floating chord shapes to walk a chord graph, then hear the
progression replayed as falling blobs.
"""

__version__ = "0.1.0"
