"""HTML redirect page with link preview tags

Chat apps and social networks build link previews from Open Graph/Twitter
tags, so a short link answers with a small HTML document carrying the preview
metadata and a client-side redirect instead of a bare 302.

All record fields come from untrusted registration input and are escaped
before interpolation.
"""

import html
from urllib.parse import urlsplit

from previewlinks.models import UrlRecord


SAFE_SCHEMES = frozenset({'http', 'https'})
BLANK_TARGET = 'about:blank'

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta http-equiv="refresh" content="0; url={url}">
<title>{title}</title>
<meta property="og:url" content="{url}">
<meta property="og:title" content="{title}">
<meta property="og:description" content="{description}">
<meta property="og:image" content="{image}">
<meta name="twitter:card" content="summary_large_image">
<meta name="twitter:title" content="{title}">
<meta name="twitter:description" content="{description}">
<meta name="twitter:image" content="{image}">
</head>
<body>
<a href="{url}">{title}</a>
</body>
</html>
"""


def redirect_target(url: str) -> str:
    """Return `url` if it is an http(s) URL, else 'about:blank'."""
    try:
        scheme = urlsplit(url.strip()).scheme.lower()
    except ValueError:
        return BLANK_TARGET
    return url.strip() if scheme in SAFE_SCHEMES else BLANK_TARGET


def render_redirect_page(record: UrlRecord) -> str:
    """Render the redirect/preview document of a record.

    Example:
        >>> page = render_redirect_page(UrlRecord('0a1b2c3d4e', 'https://example.com/?a=1&b=2', title='<b>Hi</b>'))
        >>> 'content="0; url=https://example.com/?a=1&amp;b=2"' in page
        True
        >>> '&lt;b&gt;Hi&lt;/b&gt;' in page
        True
    """
    url = redirect_target(record.canonical_url)
    return PAGE_TEMPLATE.format(
        url=html.escape(url, quote=True),
        title=html.escape(record.title or url, quote=True),
        description=html.escape(record.description, quote=True),
        image=html.escape(record.image_url, quote=True),
    )
