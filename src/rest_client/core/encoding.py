"""
Default URL encoding functions.

ClientOptions.encode is used for path/segment values and
ClientOptions.encode_query for query-string values. Both escape everything
outside the RFC 3986 unreserved set, so a single percent-decoding pass
returns the original text.
"""

from urllib.parse import quote

DEFAULT_ENCODING = "utf-8"


def url_encode(value: str) -> str:
    """
    Percent-encode a URL segment value as UTF-8.

    Examples:
        >>> url_encode("a b/c")
        'a%20b%2Fc'
    """
    return quote(value, safe="", encoding=DEFAULT_ENCODING)


def url_encode_query(value: str, encoding: str = DEFAULT_ENCODING) -> str:
    """
    Percent-encode a query-string value using ``encoding``.

    Raises:
        LookupError: unknown encoding name

    Examples:
        >>> url_encode_query("q=1&x", "utf-8")
        'q%3D1%26x'
        >>> url_encode_query("é", "latin-1")
        '%E9'
    """
    return quote(value, safe="", encoding=encoding)
