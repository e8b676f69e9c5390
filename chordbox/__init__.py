"""chordbox: guitar chord diagram images from compact text notation."""

__version__ = "0.1.0"
