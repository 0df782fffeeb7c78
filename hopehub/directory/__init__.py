"""
Request directory: loading, filtering, stats and map previews.
"""

from .loader import DirectoryState, load_directory
from .map_links import to_embed_url
from .search import DirectoryStats, compute_stats, filter_requests, other_requests

__all__ = [
    'DirectoryState',
    'DirectoryStats',
    'compute_stats',
    'filter_requests',
    'load_directory',
    'other_requests',
    'to_embed_url',
]
