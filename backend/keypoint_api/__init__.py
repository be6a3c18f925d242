"""
Affine keypoint shape service.
"""

__version__ = "0.1.0"
