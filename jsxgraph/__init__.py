"""
jsxgraph: content-addressable element graphs for JSX/TSX source trees.
"""

__version__ = "0.1.0"
