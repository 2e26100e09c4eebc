"""
Services module for photoshelf.

This module contains the service classes wrapping the backend:
- AuthService: Supabase password authentication
- StorageService: Supabase Storage operations
- MetadataService: image metadata table operations
- export: the export job phases
"""

from .auth import AuthService, UserInfo
from .backend import create_backend_client, get_backend_client
from .metadata import MetadataService
from .storage import StorageService, build_storage_path, generate_filename, get_content_type

__all__ = [
    "AuthService",
    "UserInfo",
    "MetadataService",
    "StorageService",
    "build_storage_path",
    "create_backend_client",
    "generate_filename",
    "get_backend_client",
    "get_content_type",
]
