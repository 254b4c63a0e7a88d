import json
import logging
from urllib.parse import urlsplit

from previewlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from previewlinks.exceptions import ScreenshotError
from previewlinks.services import RenderServiceScreenshotPipeline
from previewlinks.utils import generate_shortcode
from previewlinks.utils.helpers import guarantee_500_response
from previewlinks.lambdas.screenshot.constants import (
    MISSING_URL,
    INVALID_URL,
    SCREENSHOT_FAILED,
    SCREENSHOT_SUCCESS,
)


logger = logging.getLogger(__name__)


def is_http_url(url: str) -> bool:
    try:
        return urlsplit(url).scheme.lower() in {'http', 'https'}
    except ValueError:
        return False


def response_200(*, image_url: str) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'text/plain; charset=utf-8'},
        'body': image_url,
    }


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 400,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def response_502(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Bad Gateway'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 502,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle ad-hoc screenshot requests

    - Step 1: Extract the source URL from `?url=`
    - Step 2: Capture it under a fresh output name
    - Step 3: Respond with the hosted image URL as plain text

    HTTP responses:
        200: body is the hosted image URL
        400: missing or non-http(s) `url` query parameter
        502: render service or upload failed
        500: any other internal error
    """
    # 1- Extract source URL
    source_url = ((event.get('queryStringParameters') or {}).get('url') or '').strip()
    if not source_url:
        logger.info("Missing 'url' query parameter. Responding with 400.", extra={'event': MISSING_URL})
        return response_400(message="missing 'url' query parameter", error_code=MISSING_URL)
    if not is_http_url(source_url):
        logger.info('Source URL is not http(s). Responding with 400.', extra={'event': INVALID_URL})
        return response_400(message="'url' must be an http(s) URL", error_code=INVALID_URL)

    # 2- Capture under a fresh output name
    pipeline = RenderServiceScreenshotPipeline.from_environment()
    output_name = generate_shortcode()
    try:
        image_url = pipeline.capture(source_url, output_name)
    except ScreenshotError:
        logger.exception('Screenshot capture failed. Responding with 502.', extra={'event': SCREENSHOT_FAILED})
        return response_502(message='screenshot capture failed', error_code=SCREENSHOT_FAILED)

    # 3- Respond with hosted image URL
    logger.info('Captured screenshot. Responding with 200.', extra={'imageUrl': image_url, 'event': SCREENSHOT_SUCCESS})
    return response_200(image_url=image_url)
