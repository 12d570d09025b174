import asyncio
import io
import logging
from typing import Optional
from minio.error import S3Error

from ..minio_client import get_minio_client, MINIO_DEFAULT_BUCKET, MINIO_PUBLIC_URL
from ..api.exceptions import ServiceUnavailableException, NotFoundException

logger = logging.getLogger(__name__)


class StorageService:
    """Service for handling MinIO storage operations"""

    def __init__(self):
        self.client = get_minio_client()
        self.default_bucket = MINIO_DEFAULT_BUCKET

    async def ensure_bucket_exists(self, bucket_name: Optional[str] = None) -> str:
        """Ensure bucket exists, create if it doesn't"""
        bucket = bucket_name or self.default_bucket
        loop = asyncio.get_event_loop()
        try:
            exists = await loop.run_in_executor(None, self.client.bucket_exists, bucket)
            if not exists:
                await loop.run_in_executor(None, self.client.make_bucket, bucket)
                logger.info(f"Created bucket: {bucket}")
        except S3Error as e:
            logger.error(f"Error ensuring bucket exists: {e}")
            raise ServiceUnavailableException(f"Storage service error: {e}")
        return bucket

    def object_url(self, object_key: str, bucket_name: Optional[str] = None) -> str:
        bucket = bucket_name or self.default_bucket
        return f"{MINIO_PUBLIC_URL}/{bucket}/{object_key}"

    async def upload_file(
        self,
        data: bytes,
        object_key: str,
        content_type: str,
        bucket_name: Optional[str] = None
    ) -> str:
        """Upload bytes to MinIO storage, returning the bucket used"""
        bucket = await self.ensure_bucket_exists(bucket_name)

        # Run blocking client calls in executor to keep the event loop free
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(
                None,
                lambda: self.client.put_object(
                    bucket_name=bucket,
                    object_name=object_key,
                    data=io.BytesIO(data),
                    length=len(data),
                    content_type=content_type or 'application/octet-stream'
                )
            )
            logger.info(f"Uploaded object: {bucket}/{object_key}")
            return bucket

        except S3Error as e:
            logger.error(f"Error uploading file: {e}")
            if e.code == 'NoSuchBucket':
                raise NotFoundException(f"Bucket not found: {bucket}")
            raise ServiceUnavailableException(f"Storage upload error: {e}")

    async def download_file(
        self,
        object_key: str,
        bucket_name: Optional[str] = None
    ) -> bytes:
        """Download a file from MinIO storage"""
        bucket = bucket_name or self.default_bucket

        loop = asyncio.get_event_loop()
        try:
            data = await loop.run_in_executor(None, self._read_object, bucket, object_key)

            logger.info(f"Downloaded object: {bucket}/{object_key}")
            return data

        except S3Error as e:
            logger.error(f"Error downloading file: {e}")
            if e.code == 'NoSuchKey':
                raise NotFoundException(f"Object not found: {object_key}")
            if e.code == 'NoSuchBucket':
                raise NotFoundException(f"Bucket not found: {bucket}")
            raise ServiceUnavailableException(f"Storage download error: {e}")

    async def delete_file(
        self,
        object_key: str,
        bucket_name: Optional[str] = None
    ) -> bool:
        """Delete a file from MinIO storage"""
        bucket = bucket_name or self.default_bucket

        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(None, self.client.remove_object, bucket, object_key)
            logger.info(f"Deleted object: {bucket}/{object_key}")
            return True

        except S3Error as e:
            logger.error(f"Error deleting file: {e}")
            if e.code == 'NoSuchKey':
                raise NotFoundException(f"Object not found: {object_key}")
            if e.code == 'NoSuchBucket':
                raise NotFoundException(f"Bucket not found: {bucket}")
            raise ServiceUnavailableException(f"Storage delete error: {e}")

    def _read_object(self, bucket: str, object_key: str) -> bytes:
        response = self.client.get_object(bucket, object_key)
        try:
            return response.read()
        finally:
            response.close()
            response.release_conn()


_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """Get the singleton storage service instance"""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
