"""Location port: the address bar as an injected capability."""

from typing import Literal, Protocol

SetMode = Literal["merge", "replace"]


class LocationPort(Protocol):
    """Read and push query parameters of the current page URL.

    set_query_param(name, value, "merge") keeps the other parameters;
    "replace" pushes a URL carrying only `name`. A value of None removes
    the parameter.
    """

    def read_query_param(self, name: str) -> str | None: ...

    def set_query_param(
        self, name: str, value: str | None, mode: SetMode = "merge",
    ) -> None: ...

    @property
    def href(self) -> str: ...
