"""
Media Upload Gateway: proof file validation and Cloudinary uploads.
"""

from .uploader import CloudinaryUploader, MediaUploader, UploadFile, UploadResult
from .validation import validate_file, validate_proof_file

__all__ = [
    'CloudinaryUploader',
    'MediaUploader',
    'UploadFile',
    'UploadResult',
    'validate_file',
    'validate_proof_file',
]
