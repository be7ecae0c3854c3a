"""
Packal Command-Line Interface
=============================

- **packal**: check a program, dump its tokens or its parsed structure

Implemented as a Click-based CLI application.
"""

__all__ = ["packal"]
