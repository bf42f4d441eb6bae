"""FitTrack — fitness tracking backend.

Account registration and login with stateless JWT bearer tokens,
plus a small workout log behind authentication.
"""

__version__ = "0.1.0"
