"""
HTTP client for the image upload endpoint
"""
import httpx
from typing import Optional
import logging

from ..config import settings
from ..domain.models import UploadResult

logger = logging.getLogger(__name__)


class UploadClient:
    """HTTP client for posting encoded images to the upload endpoint"""

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.endpoint_url = endpoint_url or settings.UPLOAD_ENDPOINT_URL
        self.timeout = httpx.Timeout(
            settings.UPLOAD_TIMEOUT_SECONDS,
            connect=settings.UPLOAD_CONNECT_TIMEOUT_SECONDS
        )
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def start(self):
        """Initialize HTTP client"""
        self.client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        logger.info(f"Upload client initialized for {self.endpoint_url}")

    async def stop(self):
        """Close HTTP client"""
        if self.client:
            await self.client.aclose()
            self.client = None
            logger.info("Upload client closed")

    async def post_image(self, image: str) -> UploadResult:
        """
        Upload an encoded image

        Args:
            image: Base64 data URL of the image

        Returns:
            UploadResult with either an asset URL or an error message
        """
        if not self.client:
            logger.error("Upload client not initialized")
            return UploadResult(error="Upload client not initialized")

        try:
            response = await self.client.post(self.endpoint_url, json={"image": image})
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code} from upload endpoint: {e}")
            return UploadResult(error=f"Upload endpoint returned {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Upload request failed: {e}")
            return UploadResult(error=str(e) or e.__class__.__name__)

        if not isinstance(data, dict):
            return UploadResult(error="Unexpected response from upload endpoint")

        return UploadResult(
            asset_secure_url=data.get("assetSecureUrl"),
            error=data.get("error")
        )


# Global upload client instance
upload_client = UploadClient()


async def get_upload_client() -> UploadClient:
    """Dependency for getting upload client instance"""
    return upload_client
