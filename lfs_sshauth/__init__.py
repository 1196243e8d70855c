"""SSH-delegated credential acquisition for LFS transfers."""

__version__ = "0.1.0"
