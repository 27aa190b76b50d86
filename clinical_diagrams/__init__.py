"""
Clinical diagram recommendation library.

Reads free-text examination notes, extracts structured clinical findings
and recommends which anatomical diagram views to render.
"""

__version__ = "1.0.0"
