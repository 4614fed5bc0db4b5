"""HTTP span options following the OpenTelemetry semantic conventions.

See: https://opentelemetry.io/docs/specs/semconv/http/http-spans/
"""

from dataclasses import dataclass
from typing import Dict

HTTP_REQUEST_METHOD = "http.request.method"
HTTP_ROUTE = "http.route"
URL_FULL = "url.full"
URL_PATH = "url.path"


@dataclass
class ClientHTTPSpanOptions:
    """Outgoing HTTP request.

    Attributes:
        method: HTTP method (e.g. GET, POST, PUT, DELETE).
        url: Full URL of the request
            (e.g. https://api.example.com/api/v1/users?name=ben).
        route: HTTP route being hit if known, using placeholders
            (e.g. /api/v1/users/{id}).
    """

    method: str
    url: str
    route: str = ""

    def span_name(self) -> str:
        return http_span_name(self.method, self.route)

    def attributes(self) -> Dict[str, str]:
        return {
            HTTP_REQUEST_METHOD: self.method.upper(),
            URL_FULL: self.url,
            HTTP_ROUTE: self.route,
        }


@dataclass
class ServerHTTPSpanOptions:
    """Incoming HTTP request.

    Attributes:
        method: HTTP method (e.g. GET, POST, PUT, DELETE).
        route: HTTP route being hit, using placeholders
            (e.g. /api/v1/users/{id}).
        url_path: URL path with placeholders filled in, and with query
            strings (e.g. /api/v1/users/123?name=ben).
    """

    method: str
    route: str
    url_path: str = ""

    def span_name(self) -> str:
        return http_span_name(self.method, self.route)

    def attributes(self) -> Dict[str, str]:
        return {
            HTTP_REQUEST_METHOD: self.method.upper(),
            HTTP_ROUTE: self.route,
            URL_PATH: self.url_path,
        }


def http_span_name(method: str, route: str) -> str:
    """Return ``"{METHOD} {route}"``, or just the method when route is empty."""
    method = method.upper()
    if not route:
        return method
    return f"{method} {route}"
