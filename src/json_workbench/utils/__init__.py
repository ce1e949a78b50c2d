"""Utility functions for the JSON Workbench."""

from .shape_utils import ShapeUtils, ArrayPath
from .validation import ValidationUtils

__all__ = ["ShapeUtils", "ArrayPath", "ValidationUtils"]
