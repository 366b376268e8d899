import requests
from .config import Config
from .errors import UploadError


class ImageUploader:
    def __init__(self, access_token=None, api_base=None, directory=None):
        self.access_token = access_token if access_token is not None else Config.ACCESS_TOKEN
        self.api_url = f"{api_base or Config.product_api_base()}/images"
        self.directory = directory or Config.UPLOAD_DIRECTORY
        self.timeout = Config.UPLOAD_TIMEOUT_SECONDS

    def upload(self, asset, directory=None):
        """
        Upload an optimized image to the product service

        Args:
            asset: OptimizedAsset to send
            directory: Storage directory on the server (default: from config)

        Returns:
            str: URL of the stored image
        """
        if asset.optimized_size > Config.SERVER_CEILING_BYTES:
            raise UploadError(
                f"Image too large for upload: {asset.optimized_size / 1024:.1f}KB "
                f"(max: {Config.SERVER_CEILING_BYTES / 1024:.0f}KB)"
            )

        print(f"📡 Uploading {asset.name} ({asset.optimized_size / 1024:.1f}KB)...")

        headers = {'Accept': 'application/json'}
        if self.access_token:
            headers['Authorization'] = f"Bearer {self.access_token}"

        files = {'file': (asset.name, asset.data, asset.content_type)}
        data = {'directory': directory or self.directory}

        try:
            response = requests.post(
                self.api_url,
                headers=headers,
                files=files,
                data=data,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            raise UploadError("Image upload timed out - try again") from e
        except requests.exceptions.ConnectionError as e:
            raise UploadError("Failed to connect to product service") from e
        except requests.exceptions.RequestException as e:
            raise UploadError(f"Image upload failed: {e}") from e

        if response.status_code in (200, 201):
            url = self._extract_url(response)
            print(f"✅ Uploaded: {url}")
            return url

        print(f"❌ Upload Error {response.status_code}")
        if response.status_code == 401:
            raise UploadError("Authentication failed - please log in again")
        elif response.status_code == 413:
            raise UploadError("Image too large - the server rejected the file size")
        elif response.status_code == 415:
            raise UploadError("Unsupported image type")
        else:
            raise UploadError(f"API Error {response.status_code}: {response.text[:200]}")

    def upload_many(self, assets, directory=None):
        """Upload images in order, stopping at the first failure"""
        return [self.upload(asset, directory) for asset in assets]

    def _extract_url(self, response):
        """Read the stored image URL from a JSON or plain-text response"""
        content_type = response.headers.get('content-type', '').lower()

        if 'application/json' not in content_type:
            url = response.text.strip().strip('"')
            if not url:
                raise UploadError("Upload response did not contain an image URL")
            return url

        try:
            payload = response.json()
        except ValueError as e:
            raise UploadError("Upload response was not valid JSON") from e

        if isinstance(payload, str):
            return payload
        if not isinstance(payload, dict):
            raise UploadError("Upload response did not contain an image URL")
        if isinstance(payload.get('data'), (dict, str)):
            payload = payload['data']
            if isinstance(payload, str):
                return payload
        for key in ('url', 'imageUrl'):
            if payload.get(key):
                return payload[key]
        raise UploadError("Upload response did not contain an image URL")
