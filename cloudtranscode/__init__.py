"""
CloudTranscode - vendor-agnostic video transcoding on cloud encoding services
"""

__version__ = "0.1.0"
