import os
import logging
from typing import Optional

from flask import current_app
from supabase import create_client, Client

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a resume file cannot be stored or removed"""


class LocalResumeStorage:
    """Resume files on local disk, served by the app under ``url_prefix``"""

    name = 'local'

    def __init__(self, root: str, url_prefix: str = '/files/resumes'):
        self.root = root
        self.url_prefix = url_prefix.rstrip('/')
        os.makedirs(self.root, exist_ok=True)

    def _full_path(self, storage_path: str) -> str:
        full_path = os.path.abspath(os.path.join(self.root, storage_path))
        if not full_path.startswith(os.path.abspath(self.root) + os.sep):
            raise StorageError('Invalid storage path')
        return full_path

    def upload(self, storage_path: str, data: bytes, content_type: Optional[str] = None) -> str:
        full_path = self._full_path(storage_path)
        if os.path.exists(full_path):
            raise StorageError('File already exists')
        try:
            os.makedirs(os.path.dirname(full_path), exist_ok=True)
            with open(full_path, 'wb') as f:
                f.write(data)
        except OSError as e:
            raise StorageError(f"Error uploading resume: {e}") from e
        return self.public_url(storage_path)

    def public_url(self, storage_path: str) -> str:
        return f"{self.url_prefix}/{storage_path}"

    def remove(self, storage_path: str):
        full_path = self._full_path(storage_path)
        try:
            if os.path.exists(full_path):
                os.remove(full_path)
        except OSError as e:
            raise StorageError(f"Error removing resume: {e}") from e


class SupabaseResumeStorage:
    """Resume files in a Supabase Storage bucket"""

    name = 'supabase'

    def __init__(self, url: str, key: str, bucket: str, client: Optional[Client] = None):
        if not client and (not url or not key):
            raise ValueError("SUPABASE_URL and a Supabase key must be set in environment")
        self.client: Client = client or create_client(url, key)
        self.bucket = bucket

    def upload(self, storage_path: str, data: bytes, content_type: Optional[str] = None) -> str:
        try:
            self.client.storage.from_(self.bucket).upload(
                storage_path,
                data,
                {"content-type": content_type or "application/octet-stream", "upsert": "false"}
            )
        except Exception as e:
            logger.error(f"Supabase resume upload error: {e}")
            raise StorageError("Error uploading resume") from e
        return self.public_url(storage_path)

    def public_url(self, storage_path: str) -> str:
        return self.client.storage.from_(self.bucket).get_public_url(storage_path)

    def remove(self, storage_path: str):
        try:
            self.client.storage.from_(self.bucket).remove([storage_path])
        except Exception as e:
            logger.error(f"Supabase resume remove error: {e}")
            raise StorageError("Error removing resume") from e


def init_resume_storage(app):
    """Pick the storage backend for this app: Supabase when configured, else local disk"""
    if app.config.get('SUPABASE_URL') and app.config.get('SUPABASE_KEY'):
        storage = SupabaseResumeStorage(
            app.config['SUPABASE_URL'],
            app.config['SUPABASE_KEY'],
            app.config['SUPABASE_RESUME_BUCKET']
        )
        logger.info(f"Resume storage: Supabase bucket '{storage.bucket}'")
    else:
        storage = LocalResumeStorage(os.path.join(app.config['UPLOAD_FOLDER'], 'resumes'))
        logger.info(f"Resume storage: local directory {storage.root}")
    app.extensions['resume_storage'] = storage
    return storage


def get_resume_storage():
    return current_app.extensions['resume_storage']
