"""Screenshot pipeline adapter

Rendering happens in an external render service; this module only asks it for
a PNG of a page and hosts the result in S3.

Classes:
    ScreenshotPipeline:
        Interface: capture(source_url, output_name, timeout) -> hosted image URL.

    RenderServiceScreenshotPipeline:
        Fetches a PNG from the render service over HTTP and uploads it to S3.

Example:
    >>> pipeline = RenderServiceScreenshotPipeline.from_environment()
    >>> pipeline.capture('https://example.com/a', '0a1b2c3d4e', timeout=5)
    'https://cdn.example.com/screenshots/0a1b2c3d4e.png'
"""

import os
import logging
import urllib.error
import urllib.parse
import urllib.request
from abc import ABC, abstractmethod

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from previewlinks.types import S3Client
from previewlinks.constants import ENV
from previewlinks.exceptions import ScreenshotError
from previewlinks.utils.helpers import require_environment


logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = 'screenshots/'
DEFAULT_RENDER_TIMEOUT_SECONDS = 30.0


class ScreenshotPipeline(ABC):
    """Interface for screenshot capture backends."""

    @abstractmethod
    def capture(self, source_url: str, output_name: str, timeout: float | None = None) -> str:
        """Capture `source_url` and host the image under `output_name`.

        Args:
            source_url (str):
                Page to capture.
            output_name (str):
                Name of the hosted image (without extension).
            timeout (float | None):
                Upper bound in seconds for network I/O.

        Returns:
            str: Public URL of the hosted image.

        Raises:
            ScreenshotError:
                On any network, render or upload failure.
        """
        pass


class RenderServiceScreenshotPipeline(ScreenshotPipeline):
    """Capture via an HTTP render service, host in an S3 bucket.

    The render service is called as `GET <render_url>?url=<source>` and must
    answer 200 with the PNG bytes.

    Attributes:
        render_url (str):
            Render service endpoint.
        bucket (str):
            S3 bucket receiving the images.
        public_base_url (str):
            Public URL the bucket is served from (CDN or website endpoint).
        key_prefix (str):
            Object key prefix, 'screenshots/' by default.
        s3 (S3Client):
            boto3 S3 client.
    """

    def __init__(
        self,
        render_url: str,
        bucket: str,
        public_base_url: str,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        s3_client: S3Client | None = None,
    ):
        self.render_url = render_url
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip('/')
        self.key_prefix = key_prefix
        self.s3 = s3_client if s3_client is not None else boto3.client('s3')

    @classmethod
    @require_environment(ENV.Screenshot.RENDER_URL, ENV.Screenshot.BUCKET, ENV.Screenshot.PUBLIC_URL)
    def from_environment(cls, s3_client: S3Client | None = None) -> 'RenderServiceScreenshotPipeline':
        return cls(
            render_url=os.environ[ENV.Screenshot.RENDER_URL],
            bucket=os.environ[ENV.Screenshot.BUCKET],
            public_base_url=os.environ[ENV.Screenshot.PUBLIC_URL],
            key_prefix=os.environ.get(ENV.Screenshot.KEY_PREFIX, DEFAULT_KEY_PREFIX),
            s3_client=s3_client,
        )

    def capture(self, source_url: str, output_name: str, timeout: float | None = None) -> str:
        image = self._render(source_url, timeout or DEFAULT_RENDER_TIMEOUT_SECONDS)
        key = f'{self.key_prefix}{output_name}.png'

        try:
            self.s3.put_object(Bucket=self.bucket, Key=key, Body=image, ContentType='image/png')
        except (BotoCoreError, ClientError) as e:
            raise ScreenshotError(f"Failed to upload screenshot '{key}' to bucket '{self.bucket}'.") from e

        logger.debug('Uploaded screenshot.', extra={'key': key, 'size': len(image)})
        return f'{self.public_base_url}/{key}'

    def _render(self, source_url: str, timeout: float) -> bytes:
        query = urllib.parse.urlencode({'url': source_url})
        separator = '&' if '?' in self.render_url else '?'
        url = f'{self.render_url}{separator}{query}'

        try:
            with urllib.request.urlopen(url, timeout=timeout) as r:  # noqa: S310
                image = r.read()
        except (urllib.error.URLError, TimeoutError, OSError) as e:
            raise ScreenshotError(f'Render service failed for {source_url}.') from e

        if not image:
            raise ScreenshotError(f'Render service returned an empty image for {source_url}.')
        return image
