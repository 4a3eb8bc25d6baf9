"""Video Range Server.

Byte-range video serving with on-demand remux/transcode orchestration.
"""

__version__ = "0.1.0"
