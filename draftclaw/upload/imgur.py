"""Screenshot upload to Imgur."""

import asyncio
from pathlib import Path
from typing import Optional, Union

import aiohttp

from ..core.constants import BACKOFF_S, IMGUR_UPLOAD_URL
from ..utils.config import settings
from ..utils.error_handler import ConfigurationError, NetworkError, UploadError
from ..utils.log import LoggerMixin, get_logger
from ..utils.retry import is_retryable_error, retry

RETRYABLE_STATUS = (429, 500, 502, 503, 504)

logger = get_logger(__name__)


class ImgurUploader(LoggerMixin):
    """Uploads draft screenshots and returns the public link."""

    def __init__(self, client_id: Optional[str] = None, timeout_s: Optional[float] = None):
        self.client_id = client_id or settings.IMGUR_CLIENT_ID
        self.timeout_s = timeout_s or settings.UPLOAD_TIMEOUT_S

    @property
    def enabled(self) -> bool:
        return bool(self.client_id)

    async def upload(self, image_path: Union[str, Path]) -> str:
        """
        Upload an image file.

        Args:
            image_path: Local screenshot path

        Returns:
            Public image link

        Raises:
            ConfigurationError: No client id configured or file missing
            UploadError: Imgur answered but rejected the upload
            NetworkError: Transport failure after all retries
        """
        if not self.enabled:
            raise ConfigurationError("IMGUR_CLIENT_ID is not set")

        path = Path(image_path)
        if not path.is_file():
            raise ConfigurationError(f"Screenshot not found: {path}", details={"image_path": str(path)})

        context = self.log_start("Image upload", image_path=str(path))
        try:
            link = await self._post_image(path.read_bytes(), path.name)
        except Exception as e:
            self.log_error(context, e)
            raise
        self.log_success(context, link=link)
        return link

    @retry(
        max_attempts=len(BACKOFF_S) + 1,
        base_delay=BACKOFF_S[0],
        max_delay=BACKOFF_S[-1],
        exceptions=(aiohttp.ClientError, asyncio.TimeoutError, NetworkError),
        should_retry=is_retryable_error,
        logger=logger,
    )
    async def _post_image(self, data: bytes, filename: str) -> str:
        form = aiohttp.FormData()
        form.add_field("image", data, filename=filename)
        headers = {"Authorization": f"Client-ID {self.client_id}"}
        timeout = aiohttp.ClientTimeout(total=self.timeout_s)

        async with aiohttp.ClientSession(headers=headers, timeout=timeout) as session:
            async with session.post(IMGUR_UPLOAD_URL, data=form) as response:
                if response.status in RETRYABLE_STATUS:
                    raise NetworkError(f"Upload failed with status {response.status}", status=response.status)
                response.raise_for_status()
                payload = await response.json()

        if not payload.get("success"):
            raise UploadError("Unable to upload image", details={"status": payload.get("status")})
        return payload["data"]["link"]
