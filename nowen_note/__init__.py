"""nowen-note: a self-hosted note-taking backend."""

__version__ = "1.0.0"
