"""feedkeep - RSS/Atom feed reconciliation core."""

__version__ = "0.1.0"
