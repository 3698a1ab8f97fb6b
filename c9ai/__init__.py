"""C9 AI - interactive command-line assistant"""

__version__ = "2.1.0"
