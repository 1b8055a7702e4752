"""In-memory address bar implementing LocationPort.

Holds the current page URL (path + query string) and a push history, the
same way a browser router does for a single-page app.
"""

import logging
from urllib.parse import parse_qsl, urlencode, urlsplit

from port.location import SetMode

logger = logging.getLogger(__name__)


class UrlLocation:
    """Address bar backed by a URL string."""

    def __init__(self, url: str = "/"):
        parts = urlsplit(url)
        self.path = parts.path or "/"
        self._params: list[tuple[str, str]] = parse_qsl(parts.query, keep_blank_values=True)
        self.history: list[str] = [self.href]

    @property
    def href(self) -> str:
        if not self._params:
            return self.path
        return f"{self.path}?{urlencode(self._params)}"

    @property
    def params(self) -> dict[str, str]:
        return dict(self._params)

    def read_query_param(self, name: str) -> str | None:
        for key, value in self._params:
            if key == name:
                return value
        return None

    def set_query_param(
        self, name: str, value: str | None, mode: SetMode = "merge",
    ) -> None:
        if mode == "replace":
            params = [] if value is None else [(name, value)]
        else:
            params = [(k, v) for k, v in self._params if k != name]
            if value is not None:
                # Keep the parameter where it was if it already existed
                index = next((i for i, (k, _) in enumerate(self._params) if k == name), None)
                if index is None:
                    params.append((name, value))
                else:
                    params.insert(index, (name, value))
        self._params = params
        self.push(self.href)

    def push(self, href: str) -> None:
        self.history.append(href)
        logger.debug("Location pushed", extra={"href": href})
