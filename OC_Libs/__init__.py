"""
OC_Libs - Open Canvas Library Modules

This package contains core functionality for the Open Canvas editor,
organized into specialized sub-packages:

- SceneLib: Canvas scene model, renderer, bitmap loading and the scene editor
- SearchLib: Stock-photo search adapter and search panel state
"""

__version__ = "0.1.0"
