"""Cloudinary image store over its REST upload API."""

import hashlib
import time

import requests

from commerce.catalogue.media.port import ImageStore, StoredImage

API_URL = "https://api.cloudinary.com/v1_1"
FOLDER = "products"


class CloudinaryImageStore(ImageStore):
    def __init__(self, cloud_name: str, api_key: str, api_secret: str, timeout: float = 10.0, session=None) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout
        self.session = session or requests.Session()

    def _endpoint(self, action: str) -> str:
        return f"{API_URL}/{self.cloud_name}/image/{action}"

    def _sign(self, params: dict) -> str:
        """Cloudinary signature: SHA-1 of the sorted params followed by the secret."""
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode()).hexdigest()

    def _signed(self, **params) -> dict:
        params["timestamp"] = int(time.time())
        return {**params, "api_key": self.api_key, "signature": self._sign(params)}

    def upload(self, filename: str, content: bytes) -> StoredImage:
        response = self.session.post(
            self._endpoint("upload"),
            data=self._signed(folder=FOLDER),
            files={"file": (filename, content)},
            timeout=self.timeout,
        )
        response.raise_for_status()
        body = response.json()
        return StoredImage(public_id=body["public_id"], url=body["secure_url"])

    def delete(self, public_id: str) -> None:
        response = self.session.post(
            self._endpoint("destroy"),
            data=self._signed(public_id=public_id),
            timeout=self.timeout,
        )
        response.raise_for_status()
