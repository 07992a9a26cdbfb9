"""
Wrappers around the external tools aurkeep drives: pacman, git, makepkg and
the AUR RPC API.
"""

from aurkeep.backends.aur import AurClient, AurError, AurPackage
from aurkeep.backends.git import GitBackend
from aurkeep.backends.makepkg import MakepkgBackend
from aurkeep.backends.pacman import PacmanBackend

__all__ = [
    "AurClient",
    "AurError",
    "AurPackage",
    "GitBackend",
    "MakepkgBackend",
    "PacmanBackend",
]
