"""Idempotent link registration

Registering a canonical URL either creates its record (first time) or
refreshes the preview metadata of the existing one (afterwards). The shortcode
of a canonical URL never changes.

Race handling:
    - Shortcode collisions are closed by SlugAllocator (create-if-absent).
    - Two first-time registrations of the same canonical URL are closed by
      UrlRecordBaseDAO.claim(), which binds a shortcode to the canonical URL
      only if none is bound yet. The loser releases its placeholder and
      updates the winner's record instead, so both return the same link.

Screenshot capture is best-effort: it runs in a worker thread under whatever
is left of the registration budget, and on failure or timeout the caller's
imageUrl (or nothing) is used.

Example:
    >>> registry = RegistryUpsertCoordinator(dao, SlugAllocator(dao), base_url='https://go.example.com')
    >>> registry.register(RegisterRequest(url='https://example.com/a', title='A', image_url='https://img/a.png'))
    'https://go.example.com/9f3b2c71aa'
"""

import time
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError

from previewlinks.models import UrlRecord, RegisterRequest
from previewlinks.constants import Limits
from previewlinks.dao.base import UrlRecordBaseDAO
from previewlinks.exceptions import DataCorruptionError
from previewlinks.services.slug_allocator import SlugAllocator
from previewlinks.services.screenshot import ScreenshotPipeline


logger = logging.getLogger(__name__)


class RegistryUpsertCoordinator:
    """Register canonical URLs and return their short links.

    Attributes:
        dao (UrlRecordBaseDAO):
            Record store.
        allocator (SlugAllocator):
            Shortcode allocator sharing the same store.
        base_url (str):
            Public base URL prepended to shortcodes.
        screenshots (ScreenshotPipeline | None):
            Screenshot backend. None disables capture.
        timeout (float):
            Budget in seconds for a whole register() call.
    """

    def __init__(
        self,
        dao: UrlRecordBaseDAO,
        allocator: SlugAllocator,
        base_url: str,
        screenshots: ScreenshotPipeline | None = None,
        timeout: float = Limits.REGISTRATION_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.dao = dao
        self.allocator = allocator
        self.base_url = base_url.rstrip('/')
        self.screenshots = screenshots
        self.timeout = timeout
        self.clock = clock

    def register(self, request: RegisterRequest) -> str:
        """Create or refresh the record of a canonical URL.

        Args:
            request (RegisterRequest):
                Validated registration request.

        Returns:
            str: The short link `<base_url>/<shortcode>`.

        Raises:
            DataCorruptionError:
                If more than one record is registered for the canonical URL.
            AllocationExhaustedError:
                If no free shortcode could be reserved.
            DataStoreError:
                If the store is unreachable.
        """
        deadline = self.clock() + self.timeout

        matches = self.dao.query(request.url)
        if len(matches) > 1:
            raise DataCorruptionError(f'{len(matches)} records registered for one canonical URL.')

        if matches:
            shortcode, created = matches[0], False
        else:
            shortcode, created = self._allocate_and_claim(request.url)

        record = UrlRecord(
            shortcode=shortcode,
            canonical_url=request.url,
            title=request.title,
            description=request.description,
            image_url=self._preview_image(request, shortcode, deadline),
            image_screenshot_url=request.image_screenshot_url,
        )
        self.dao.update(record)

        logger.info(
            'Registered new canonical URL.' if created else 'Updated registered canonical URL.',
            extra={'shortcode': shortcode, 'newRecord': created},
        )
        return f'{self.base_url}/{shortcode}'

    def _allocate_and_claim(self, canonical_url: str) -> tuple[str, bool]:
        shortcode = self.allocator.allocate()
        winners = self.dao.claim(canonical_url, shortcode)
        if winners == [shortcode]:
            return shortcode, True

        # Another registration bound the canonical URL first
        self.dao.release(shortcode)
        if len(winners) > 1:
            raise DataCorruptionError(f'{len(winners)} records registered for one canonical URL.')

        logger.info('Lost registration race, reusing shortcode.', extra={'shortcode': winners[0], 'released': shortcode})
        return winners[0], False

    def _preview_image(self, request: RegisterRequest, shortcode: str, deadline: float) -> str:
        """Return the preview image URL, capturing a screenshot if one was requested.

        Never raises: any capture problem falls back to `request.image_url`.
        """
        if not request.image_screenshot_url:
            return request.image_url
        if self.screenshots is None:
            logger.info('Screenshot requested but no pipeline configured.', extra={'shortcode': shortcode})
            return request.image_url

        budget = deadline - self.clock() - Limits.WRITE_RESERVE_SECONDS
        if budget <= 0:
            logger.warning('No time left for screenshot capture.', extra={'shortcode': shortcode})
            return request.image_url

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='screenshot')
        future = executor.submit(self.screenshots.capture, request.image_screenshot_url, shortcode, budget)
        try:
            return future.result(timeout=budget)
        except FuturesTimeoutError:
            future.cancel()
            logger.warning('Screenshot capture timed out.', extra={'shortcode': shortcode, 'budget': budget})
        except Exception:
            logger.warning('Screenshot capture failed.', extra={'shortcode': shortcode}, exc_info=True)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return request.image_url
