"""
qonvert: batch video conversion with FFmpeg.

Each input file is converted by its own FFmpeg process. The progress FFmpeg
reports on stdout drives a live progress bar per file, and one failing file
never stops the others.
"""

__version__ = "0.3.0"
