"""
HopeHub: donation matching for students, schools and libraries.

Aid requests carry proof documents; donors browse requests and pledge items.
All state lives in a remote document store, proof files on a media host.
"""

__version__ = "0.1.0"
