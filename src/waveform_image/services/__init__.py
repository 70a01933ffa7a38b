"""Codec collaborators used by the render pipeline."""
