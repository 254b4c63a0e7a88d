"""Data models for registered links and registration requests.

Classes:
    UrlRecord:
        A registered link: shortcode, canonical URL and preview metadata.

    RegisterRequest:
        Validated body of a registration request.

Example:
    >>> request = RegisterRequest.from_body({'url': 'https://example.com/a', 'imageUrl': 'https://img/a.png'})
    >>> record = UrlRecord(shortcode='0a1b2c3d4e', canonical_url=request.url, image_url=request.image_url)
    >>> record.to_mapping()['canonicalUrl']
    'https://example.com/a'
"""

from dataclasses import dataclass, fields
from typing import Any
from urllib.parse import urlsplit

from previewlinks.types import RecordMapping
from previewlinks.exceptions import InvalidArgumentError


# Python attribute name -> persisted/wire field name
FIELD_NAMES = {
    'shortcode': 'shortCode',
    'canonical_url': 'canonicalUrl',
    'title': 'title',
    'description': 'description',
    'image_url': 'imageUrl',
    'image_screenshot_url': 'imageScreenshotUrl',
}

# Accepted registration body keys
REQUEST_FIELD_NAMES = {
    'url': 'url',
    'title': 'title',
    'description': 'description',
    'image_url': 'imageUrl',
    'image_screenshot_url': 'imageScreenshotUrl',
}


# fmt: off
@dataclass(frozen=True)
class UrlRecord:
    shortcode: str                   # Unique system-generated key, never reassigned
    canonical_url: str               # Redirect target, at most one record per value
    title: str = ''                  # Preview title, overwritten on re-registration
    description: str = ''            # Preview description, overwritten on re-registration
    image_url: str = ''              # Preview image (given or captured)
    image_screenshot_url: str = ''   # Source URL for screenshot capture
    # fmt: on

    def to_mapping(self) -> RecordMapping:
        return {FIELD_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_mapping(cls, mapping: RecordMapping) -> 'UrlRecord':
        return cls(**{attr: mapping.get(name) or '' for attr, name in FIELD_NAMES.items()})


@dataclass(frozen=True)
class RegisterRequest:
    """Registration request body.

    Attributes:
        url (str):
            Canonical URL to shorten. Required.
        title (str):
            Preview title.
        description (str):
            Preview description.
        image_url (str):
            Preview image URL supplied by the caller.
        image_screenshot_url (str):
            URL to capture as the preview image.

    NOTE:
        At least one of `image_url` and `image_screenshot_url` must be set.
    """

    url: str
    title: str = ''
    description: str = ''
    image_url: str = ''
    image_screenshot_url: str = ''

    def __post_init__(self):
        if not self.url:
            raise InvalidArgumentError("missing 'url'")
        try:
            urlsplit(self.url)
        except ValueError as e:  # e.g. unbalanced IPv6 brackets
            raise InvalidArgumentError("malformed 'url'") from e
        if not self.image_url and not self.image_screenshot_url:
            raise InvalidArgumentError("one of 'imageUrl' or 'imageScreenshotUrl' is required")

    @classmethod
    def from_body(cls, body: Any) -> 'RegisterRequest':
        """Build a request from a decoded JSON body.

        Args:
            body (Any):
                Decoded JSON value of the request body.

        Returns:
            RegisterRequest: validated request with whitespace-stripped fields.

        Raises:
            InvalidArgumentError:
                If the body is not an object, a field is not a string, `url` is
                missing or unparsable, or neither image field is set.
        """
        if not isinstance(body, dict):
            raise InvalidArgumentError('request body must be a JSON object')

        values = {}
        for attr, name in REQUEST_FIELD_NAMES.items():
            value = body.get(name)
            if value is None:
                continue
            if not isinstance(value, str):
                raise InvalidArgumentError(f"'{name}' must be a string")
            values[attr] = value.strip()

        return cls(**{'url': '', **values})
