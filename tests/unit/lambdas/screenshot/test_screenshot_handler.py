import json
from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from previewlinks.types import LambdaEvent, LambdaContext
from previewlinks.lambdas.screenshot import app
from previewlinks.services import RenderServiceScreenshotPipeline
from previewlinks.exceptions import ScreenshotError, MissingEnvironmentVariableError


def screenshot_event(query: dict | None) -> LambdaEvent:
    return cast(
        LambdaEvent,
        {
            'resource': '/screenshot',
            'queryStringParameters': query,
            'httpMethod': 'POST',
            'path': '/screenshot',
            'requestContext': {'resourcePath': '/screenshot', 'httpMethod': 'POST', 'domainName': 'go.example.com', 'stage': 'test'},
        },
    )


class TestScreenshotHandler:
    pipeline: RenderServiceScreenshotPipeline
    pipeline_class: MagicMock
    context: LambdaContext

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch) -> None:
        self.pipeline = cast(RenderServiceScreenshotPipeline, MagicMock(spec=RenderServiceScreenshotPipeline))
        self.pipeline.capture.return_value = 'https://cdn.example.com/screenshots/0a1b2c3d4e.png'
        self.pipeline_class = MagicMock()
        self.pipeline_class.from_environment.return_value = self.pipeline

        monkeypatch.setattr(app, 'RenderServiceScreenshotPipeline', self.pipeline_class)
        monkeypatch.setattr(app, 'generate_shortcode', lambda: '0a1b2c3d4e')

        self.context = cast(LambdaContext, {'function_name': 'screenshot'})

    def test_lambda_handler(self) -> None:
        response = app.lambda_handler(screenshot_event({'url': 'https://example.com/a'}), self.context)

        assert response['statusCode'] == 200
        assert response['headers']['Content-Type'] == 'text/plain; charset=utf-8'
        assert response['body'] == 'https://cdn.example.com/screenshots/0a1b2c3d4e.png'
        self.pipeline.capture.assert_called_once_with('https://example.com/a', '0a1b2c3d4e')

    @pytest.mark.parametrize('query', [None, {}, {'url': ''}, {'url': '  '}])
    def test_lambda_handler_with_missing_url(self, query) -> None:
        response = app.lambda_handler(screenshot_event(query), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body == {'message': "Bad Request (missing 'url' query parameter)", 'errorCode': 'MISSING_URL'}
        self.pipeline.capture.assert_not_called()

    @pytest.mark.parametrize('url', ['file:///etc/passwd', 'javascript:alert(1)', 'example.com/a', 'http://[::1'])
    def test_lambda_handler_with_non_http_url(self, url: str) -> None:
        response = app.lambda_handler(screenshot_event({'url': url}), self.context)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['errorCode'] == 'INVALID_URL'
        self.pipeline.capture.assert_not_called()

    def test_lambda_handler_with_capture_failure(self) -> None:
        self.pipeline.capture.side_effect = ScreenshotError('Render service failed for https://example.com/a.')

        response = app.lambda_handler(screenshot_event({'url': 'https://example.com/a'}), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 502
        assert body == {'message': 'Bad Gateway (screenshot capture failed)', 'errorCode': 'SCREENSHOT_FAILED'}

    def test_lambda_handler_without_pipeline_configuration(self) -> None:
        self.pipeline_class.from_environment.side_effect = MissingEnvironmentVariableError(
            "Missing required environment variables: 'SCREENSHOT_BUCKET'"
        )

        response = app.lambda_handler(screenshot_event({'url': 'https://example.com/a'}), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body == {'message': 'Internal Server Error', 'errorCode': 'UNKNOWN_INTERNAL_SERVER_ERROR'}

    def test_lambda_handler_generates_fresh_output_names(self, monkeypatch: MonkeyPatch) -> None:
        names = iter(['aaaaaaaaaa', 'bbbbbbbbbb'])
        monkeypatch.setattr(app, 'generate_shortcode', lambda: next(names))

        app.lambda_handler(screenshot_event({'url': 'https://example.com/a'}), self.context)
        app.lambda_handler(screenshot_event({'url': 'https://example.com/a'}), self.context)

        assert [c.args[1] for c in self.pipeline.capture.call_args_list] == ['aaaaaaaaaa', 'bbbbbbbbbb']
