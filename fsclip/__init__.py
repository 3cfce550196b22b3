"""
fs-clip - copies files dropped into a watched directory to the clipboard
"""
__version__ = "1.0.0"
