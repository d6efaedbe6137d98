"""
Gantt scheduler - dependency-aware scheduling core for a Gantt chart editor.
"""

__version__ = "0.1.0"
