"""
hls-cli: download a segmented HLS video and reassemble it into a single file.
"""

__version__ = "1.0.0"
