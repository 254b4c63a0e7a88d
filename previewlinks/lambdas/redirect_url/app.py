import json
import logging

from previewlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from previewlinks.dao.redis import UrlRecordRedisDAO
from previewlinks.dao.exceptions import DataStoreError
from previewlinks.exceptions import InvalidArgumentError, NotFoundError
from previewlinks.services import Resolver, render_redirect_page
from previewlinks.utils import load_config, app_prefix
from previewlinks.utils.helpers import guarantee_500_response
from previewlinks.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    MALFORMED_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    DATA_STORE_UNAVAILABLE,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


def response_200(*, page: str) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'text/html; charset=utf-8'},
        'body': page,
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


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    base = 'Not Found'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 404,
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


def requested_shortcode(event: LambdaEvent) -> str:
    """Shortcode from the `{shortcode}` path segment, or from the legacy `?url=<code>` query."""
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if shortcode is None:
        shortcode = (event.get('queryStringParameters') or {}).get('url')
    return (shortcode or '').strip()


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to resolve short links

    This Lambda handler follows this procedure to resolve short links:
    - Step 1: Extract and validate the shortcode
    - Step 2: Get application's config and connect to the database
    - Step 3: Look up the record by shortcode
    - Step 4: Respond with the redirect/preview HTML document

    HTTP responses:
        200: Short link resolved
            body: HTML document redirecting to the canonical URL, with Open Graph tags
        400: Bad client request
            message: missing or malformed shortcode
        404: Not found
            message: no record for the shortcode
        500: Internal server error
            message: database unreachable, or any other internal error

    Args:
        event (LambdaEvent):
            API Gateway event payload containing the shortcode path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        LambdaResponse:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'shortcode': '0a1b2c3d4e'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> response['headers']['Content-Type']
        'text/html; charset=utf-8'
    """
    # 1- Extract and validate shortcode
    requested = requested_shortcode(event)
    try:
        shortcode = Resolver.validate(requested)
    except InvalidArgumentError as e:
        error_code = MALFORMED_SHORTCODE if requested else MISSING_SHORTCODE
        logger.info('Invalid shortcode. Responding with 400.', extra={'event': error_code})
        return response_400(message=str(e), error_code=error_code)

    # 2- Get application's config and connect to the database
    app_config = load_config('redirect_url')
    logger.debug('Assuming Redis as the backend database for link records')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 3- Look up the record by shortcode
    try:
        url_record_dao = UrlRecordRedisDAO(**redis_config, prefix=app_prefix())
        record = Resolver(url_record_dao).resolve(shortcode)
    except NotFoundError:
        logger.info(
            'Link record not found in database. Responding with 404.',
            extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND},
        )
        return response_404(message='short link does not exist', error_code=SHORT_URL_NOT_FOUND)
    except DataStoreError:
        logger.exception('Database unreachable. Responding with 500.', extra={'shortcode': shortcode, 'event': DATA_STORE_UNAVAILABLE})
        return response_500(message='database unavailable', error_code=DATA_STORE_UNAVAILABLE)

    # 4- Respond with the redirect document
    logger.info(
        'Resolved short link. Responding with 200.',
        extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS},
    )
    return response_200(page=render_redirect_page(record))
