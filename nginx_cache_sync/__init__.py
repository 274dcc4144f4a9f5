"""
nginx-cache-sync

Polls the WordPress cache-clear marker and purges the nginx on-disk cache
when it changes.
"""

__version__ = "1.0.0"
