"""
Test doubles and request helpers shared by the test modules.
"""

from typing import Dict, Optional
from fastapi.testclient import TestClient

from tracker_backend.api.exceptions import NotFoundException


class InMemoryStorageService:
    """Blob store with the StorageService interface, kept in a dict."""

    def __init__(self):
        self.default_bucket = "test-images"
        self.objects: Dict[tuple, bytes] = {}

    def object_url(self, object_key: str, bucket_name: Optional[str] = None) -> str:
        return f"https://storage.test/{bucket_name or self.default_bucket}/{object_key}"

    async def upload_file(self, data: bytes, object_key: str, content_type: str, bucket_name: Optional[str] = None) -> str:
        bucket = bucket_name or self.default_bucket
        self.objects[(bucket, object_key)] = data
        return bucket

    async def download_file(self, object_key: str, bucket_name: Optional[str] = None) -> bytes:
        bucket = bucket_name or self.default_bucket
        if (bucket, object_key) not in self.objects:
            raise NotFoundException(f"Object not found: {object_key}")
        return self.objects[(bucket, object_key)]

    async def delete_file(self, object_key: str, bucket_name: Optional[str] = None) -> bool:
        bucket = bucket_name or self.default_bucket
        if self.objects.pop((bucket, object_key), None) is None:
            raise NotFoundException(f"Object not found: {object_key}")
        return True


def register_and_login(client: TestClient, username: str, email: Optional[str] = None, password: str = "password123") -> Dict[str, str]:
    """Register through the API and return an Authorization header."""
    email = email or f"{username}@example.com"
    response = client.post("/api/auth/register", json={
        "username": username,
        "email": email,
        "password": password,
        "first_name": username.capitalize(),
        "last_name": "Tester",
    })
    assert response.status_code == 201, response.text

    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}
