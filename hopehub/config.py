"""
Environment-driven configuration.

Values are read from the process environment after loading a local .env file:

    MONGO_URI                 MongoDB connection string
    MONGO_DB_NAME             Database name (default: hopehub)
    CLOUDINARY_CLOUD_NAME     Media host account
    CLOUDINARY_UPLOAD_PRESET  Unsigned upload preset
    CLOUDINARY_FOLDER         Folder for uploaded proofs (default: hopenotes/files)
    HOPEHUB_LISTING_LIMIT     Max records per resource listing (default: 100)
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "hopehub"
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_upload_preset: Optional[str] = None
    cloudinary_folder: str = "hopenotes/files"
    listing_limit: int = 100

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "Settings":
        """
        Build settings from the environment.

        Args:
            dotenv_path: Optional explicit .env file (default: search upwards)

        Returns:
            Settings
        """
        load_dotenv(dotenv_path)

        return cls(
            mongo_uri=os.getenv("MONGO_URI", cls.mongo_uri),
            mongo_db_name=os.getenv("MONGO_DB_NAME", cls.mongo_db_name),
            cloudinary_cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME") or None,
            cloudinary_upload_preset=os.getenv("CLOUDINARY_UPLOAD_PRESET") or None,
            cloudinary_folder=os.getenv("CLOUDINARY_FOLDER", cls.cloudinary_folder),
            listing_limit=int(os.getenv("HOPEHUB_LISTING_LIMIT", cls.listing_limit)),
        )
