"""
aurkeep: keep local clones of AUR build recipes and build them with makepkg.
"""

__version__ = "0.1.0"
