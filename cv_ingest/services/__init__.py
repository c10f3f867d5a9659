"""Service exports."""

from .upload_validator import validate_upload

__all__ = ["validate_upload"]
