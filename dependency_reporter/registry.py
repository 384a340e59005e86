"""
npm registry client.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from .exceptions import FetchError
from .interfaces import PackageRegistry
from .models import UNKNOWN, RegistryRecord


logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_REQUESTS_PER_PAUSE = 50
DEFAULT_PAUSE_SECONDS = 60.0
DEFAULT_REQUEST_DELAY = 0.1


@dataclass
class RequestThrottle:
    """Courtesy pacing between registry requests.

    Sleeps ``pause_seconds`` after every ``requests_per_pause`` requests and
    ``request_delay`` after each one.
    """

    requests_per_pause: int = DEFAULT_REQUESTS_PER_PAUSE
    pause_seconds: float = DEFAULT_PAUSE_SECONDS
    request_delay: float = DEFAULT_REQUEST_DELAY
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    request_count: int = 0

    def after_request(self) -> None:
        self.request_count += 1
        if self.requests_per_pause > 0 and self.request_count % self.requests_per_pause == 0:
            logger.info("Rate limiting... waiting %s seconds", self.pause_seconds)
            self.sleep(self.pause_seconds)
        if self.request_delay > 0:
            self.sleep(self.request_delay)


def _format_author(author: Any) -> str:
    if not author:
        return UNKNOWN
    if isinstance(author, dict):
        return str(author.get("name") or UNKNOWN)
    return str(author)


def _format_license(license_value: Any) -> str:
    if not license_value:
        return UNKNOWN
    if isinstance(license_value, dict):
        return str(license_value.get("type") or UNKNOWN)
    return str(license_value)


def _format_repository(repository: Any) -> str:
    if not repository:
        return ""
    if isinstance(repository, dict):
        return str(repository.get("url") or "")
    return str(repository)


def _format_keywords(keywords: Any) -> Tuple[str, ...]:
    if not keywords:
        return ()
    if isinstance(keywords, str):
        return (keywords,)
    if isinstance(keywords, list):
        return tuple(keyword for keyword in keywords if isinstance(keyword, str))
    return ()


def parse_registry_record(package_name: str, data: Dict) -> RegistryRecord:
    """Build a RegistryRecord from a registry ``/latest`` document."""
    time_data = data.get("time")
    if not isinstance(time_data, dict):
        time_data = {}
    maintainers = data.get("maintainers")
    return RegistryRecord(
        name=package_name,
        latest_version=str(data.get("version") or UNKNOWN),
        description=str(data.get("description") or ""),
        license=_format_license(data.get("license")),
        author=_format_author(data.get("author")),
        homepage=str(data.get("homepage") or ""),
        repository_url=_format_repository(data.get("repository")),
        keywords=_format_keywords(data.get("keywords")),
        maintainer_count=len(maintainers) if isinstance(maintainers, list) else 0,
        created_at=str(time_data.get("created") or ""),
        modified_at=str(time_data.get("modified") or ""),
    )


class NpmRegistryClient(PackageRegistry):
    """Fetch latest package metadata from an npm-compatible registry."""

    def __init__(
        self,
        registry_url: str = DEFAULT_REGISTRY_URL,
        throttle: Optional[RequestThrottle] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.registry_url = registry_url.rstrip("/")
        self.throttle = throttle if throttle is not None else RequestThrottle()
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def fetch_latest(self, package_name: str) -> RegistryRecord:
        """Fetch the latest published version of a package.

        Raises:
            FetchError: On network failures, non-2xx responses or a body
                that is not a JSON object
        """
        url = f"{self.registry_url}/{package_name}/latest"
        logger.debug("GET %s", url)
        try:
            with self.session.get(url, timeout=self.timeout) as response:
                response.raise_for_status()
                data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise FetchError(package_name, e) from e
        finally:
            self.throttle.after_request()

        if not isinstance(data, dict):
            raise FetchError(package_name, "unexpected response body")
        try:
            return parse_registry_record(package_name, data)
        except (AttributeError, TypeError, ValueError) as e:
            raise FetchError(package_name, f"unexpected response body: {e}") from e

    def close(self) -> None:
        self.session.close()
