import os
import json
import base64
import logging

from previewlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from previewlinks.constants import ENV
from previewlinks.models import RegisterRequest
from previewlinks.dao.redis import UrlRecordRedisDAO
from previewlinks.dao.exceptions import DataStoreError
from previewlinks.exceptions import InvalidArgumentError, AllocationExhaustedError, DataCorruptionError
from previewlinks.services import SlugAllocator, RegistryUpsertCoordinator, RenderServiceScreenshotPipeline, ScreenshotPipeline
from previewlinks.utils import load_config, app_prefix, public_base_url, registration_timeout
from previewlinks.utils.helpers import guarantee_500_response
from previewlinks.lambdas.register_url.constants import (
    INVALID_JSON,
    INVALID_REQUEST,
    DATA_STORE_UNAVAILABLE,
    SHORTCODE_ALLOCATION_EXHAUSTED,
    DUPLICATE_CANONICAL_URL,
    REGISTER_SUCCESS,
)


logger = logging.getLogger(__name__)


def response_200(*, short_url: str) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'text/plain; charset=utf-8'},
        'body': short_url,
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


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 500,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def request_body(event: LambdaEvent) -> str:
    body = event.get('body') or '{}'
    if event.get('isBase64Encoded'):
        body = base64.b64decode(body, validate=True).decode('utf-8')
    return body


def screenshot_pipeline(request: RegisterRequest) -> ScreenshotPipeline | None:
    """Build the screenshot pipeline if the request asks for a capture and one is configured."""
    if not request.image_screenshot_url:
        return None
    if not os.environ.get(ENV.Screenshot.RENDER_URL):
        logger.warning('Screenshot requested but SCREENSHOT_RENDER_URL is not set.')
        return None
    return RenderServiceScreenshotPipeline.from_environment()


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to register URLs

    This Lambda handler follows this procedure to register URLs:
    - Step 1: Parse and validate the JSON request body
    - Step 2: Get application's config and connect to the database
    - Step 3: Create or update the record of the canonical URL
    - Step 4: Respond with the short link as plain text

    HTTP responses:
        200: Canonical URL registered (created or updated)
            body: short link, e.g. https://go.example.com/0a1b2c3d4e
        400: Bad client request
            message: invalid JSON body, missing 'url', or no image field
        500: Internal server error
            message: database unreachable, allocation exhausted, duplicate records,
                     or any other internal error

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'body': '{"url": "https://example.com/a", "imageUrl": "https://img/a.png"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> response['body']
        'https://go.example.com/0a1b2c3d4e'
    """
    # 1- Parse and validate request body
    try:
        body = json.loads(request_body(event))
    except ValueError:  # JSONDecodeError, bad base64, bad UTF-8
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON)

    try:
        request = RegisterRequest.from_body(body)
    except InvalidArgumentError as e:
        logger.info('Invalid registration request. Responding with 400.', extra={'event': INVALID_REQUEST, 'reason': str(e)})
        return response_400(message=str(e), error_code=INVALID_REQUEST)

    # 2- Get application's config and connect to the database
    app_config = load_config('register_url')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    try:
        url_record_dao = UrlRecordRedisDAO(**redis_config, prefix=app_prefix())
    except DataStoreError:
        logger.exception('Database unreachable. Responding with 500.', extra={'event': DATA_STORE_UNAVAILABLE})
        return response_500(message='database unavailable', error_code=DATA_STORE_UNAVAILABLE)

    registry = RegistryUpsertCoordinator(
        dao=url_record_dao,
        allocator=SlugAllocator(url_record_dao),
        base_url=public_base_url(event),
        screenshots=screenshot_pipeline(request),
        timeout=registration_timeout(),
    )

    # 3- Create or update the record of the canonical URL
    try:
        short_url = registry.register(request)
    except DataStoreError:
        logger.exception('Database failed during registration. Responding with 500.', extra={'event': DATA_STORE_UNAVAILABLE})
        return response_500(message='database unavailable', error_code=DATA_STORE_UNAVAILABLE)
    except AllocationExhaustedError:
        logger.exception('Shortcode allocation exhausted. Responding with 500.', extra={'event': SHORTCODE_ALLOCATION_EXHAUSTED})
        return response_500(message='no shortcode available', error_code=SHORTCODE_ALLOCATION_EXHAUSTED)
    except DataCorruptionError:
        logger.exception('Canonical URL registered more than once. Responding with 500.', extra={'event': DUPLICATE_CANONICAL_URL})
        return response_500(error_code=DUPLICATE_CANONICAL_URL)

    # 4- Respond with the short link
    logger.info('Registered canonical URL. Responding with 200.', extra={'shortUrl': short_url, 'event': REGISTER_SUCCESS})
    return response_200(short_url=short_url)
