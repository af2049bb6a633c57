"""HTTP transport for talking to ACME servers.

:class:`HttpConnector` owns the transport configuration (timeouts,
proxy, TLS trust, user agent) and opens raw ``urllib`` responses.  It
knows nothing about the ACME protocol; that is the job of
:class:`~acmelink.connector.connection.DefaultConnection`.

Providers that need special transport behaviour (a private CA bundle,
a proxy) override :meth:`AcmeProvider.create_http_connector` and
return a configured or subclassed connector.
"""

from __future__ import annotations

import logging
import ssl
import urllib.error
import urllib.request
from typing import TYPE_CHECKING, Any

from acmelink.config.settings import build_settings
from acmelink.errors import AcmeNetworkError

if TYPE_CHECKING:
    from acmelink.config.settings import ConnectorSettings

log = logging.getLogger(__name__)


class HttpConnector:
    """Open HTTP(S) requests with the configured transport settings.

    Parameters
    ----------
    settings:
        The ``connector`` configuration section.  Defaults apply when
        omitted.

    """

    def __init__(self, settings: ConnectorSettings | None = None) -> None:
        self.settings = settings or build_settings().connector
        self._opener: urllib.request.OpenerDirector | None = None

    def create_ssl_context(self) -> ssl.SSLContext:
        """Build the SSL context used for HTTPS requests.

        Subclasses may override this to pin a certificate or relax
        verification for test servers.
        """
        ctx = ssl.create_default_context()

        if self.settings.ca_cert_path:
            ctx.load_verify_locations(self.settings.ca_cert_path)

        if not self.settings.verify_ssl:
            log.warning("TLS certificate verification is disabled")
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE

        return ctx

    def _get_opener(self) -> urllib.request.OpenerDirector:
        """Build (and cache) the opener with TLS and proxy config."""
        if self._opener is not None:
            return self._opener

        handlers: list[urllib.request.BaseHandler] = [
            urllib.request.HTTPSHandler(context=self.create_ssl_context()),
        ]
        if self.settings.proxy_url:
            handlers.append(
                urllib.request.ProxyHandler(
                    {
                        "http": self.settings.proxy_url,
                        "https": self.settings.proxy_url,
                    },
                ),
            )
        self._opener = urllib.request.build_opener(*handlers)
        return self._opener

    def open(
        self,
        url: str,
        *,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        data: bytes | None = None,
    ) -> Any:  # noqa: ANN401
        """Send one request and return the response object.

        Responses with an error status are returned as-is (the
        ``HTTPError`` doubles as a response), so the caller decides what
        an acceptable status is.

        Raises
        ------
        AcmeNetworkError
            If the server cannot be reached.

        """
        req = urllib.request.Request(url, data=data, method=method)
        req.add_header("User-Agent", self.settings.user_agent)
        for key, value in (headers or {}).items():
            req.add_header(key, value)

        try:
            return self._get_opener().open(req, timeout=self.settings.timeout_seconds)
        except urllib.error.HTTPError as exc:
            return exc
        except (urllib.error.URLError, OSError) as exc:
            msg = f"Failed to reach ACME server at {url}: {exc}"
            raise AcmeNetworkError(msg) from exc
