"""Highlight projection for rendering layers."""

from .projector import Projection, Segment, project

__all__ = ["Projection", "Segment", "project"]
