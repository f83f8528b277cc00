"""Bank of England rate feed fetcher."""

import json
import logging
import xml.etree.ElementTree as ET

import httpx

from bank_rate_dashboard import __version__
from bank_rate_dashboard.config import BOE_FEED_URL, Settings
from bank_rate_dashboard.data.normalizer import (
    ATTRIBUTE_PREFIX,
    TEXT_KEY,
    Node,
    normalize_document,
)
from bank_rate_dashboard.models import RateSeries


logger = logging.getLogger(__name__)

MIN_PAYLOAD_LENGTH = 100


class FeedError(Exception):
    """The rate feed could not be turned into a series."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class FeedUnavailableError(FeedError):
    """HTTP or transport failure talking to the feed."""

    def __init__(
        self, message: str, details: str | None = None, status_code: int | None = None
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class InvalidFeedError(FeedError):
    """The response body is not a usable XML document."""


class NoObservationsError(FeedError):
    """The document parsed but holds no observations."""


def validate_payload(text: str) -> None:
    """Reject HTML error pages and empty bodies before parsing."""
    if text.startswith("<!DOCTYPE html") or "<html" in text:
        logger.error(f"Received HTML instead of XML. First 500 chars: {text[:500]}")
        raise InvalidFeedError("Received HTML instead of XML from Bank of England")

    if len(text.strip()) < MIN_PAYLOAD_LENGTH:
        logger.error(f"Received empty or very short XML response. Length: {len(text)}")
        raise InvalidFeedError("Received empty or invalid XML from Bank of England")


def _local_name(tag: str) -> str:
    """Strip an ElementTree '{namespace}' prefix."""
    return tag.rsplit("}", 1)[-1]


def element_to_node(element: ET.Element) -> Node:
    """
    Convert an element to the generic tree the normalizer reads.

    Attributes become "@name" keys, children become keys by tag (a list when
    the tag repeats). An element with neither collapses to its text.
    """
    node: dict = {
        ATTRIBUTE_PREFIX + _local_name(name): value
        for name, value in element.attrib.items()
    }

    for child in element:
        key = _local_name(child.tag)
        value = element_to_node(child)
        if key not in node:
            node[key] = value
        elif isinstance(node[key], list):
            node[key].append(value)
        else:
            node[key] = [node[key], value]

    text = (element.text or "").strip()
    if not node:
        return text or None
    if text:
        node[TEXT_KEY] = text
    return node


def parse_xml(text: str) -> dict:
    """Parse feed XML into {root_tag: root_node}."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        logger.error(f"XML parsing failed: {e}")
        logger.error(f"XML preview (first 1000 chars): {text[:1000]}")
        raise InvalidFeedError(
            "Failed to parse XML from Bank of England", details=str(e)
        ) from e

    try:
        return {_local_name(root.tag): element_to_node(root)}
    except RecursionError as e:
        logger.error("XML document is nested too deeply to convert")
        raise InvalidFeedError(
            "Failed to parse XML from Bank of England",
            details="Document nesting is too deep",
        ) from e


class BoeFetcher:
    """Fetches the Bank Rate history from the Bank of England database."""

    def __init__(
        self, settings: Settings | None = None, client: httpx.Client | None = None
    ) -> None:
        self.settings = settings or Settings()
        self.settings.validate()
        self._client = client

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.settings.request_timeout,
                headers={"User-Agent": f"bank-rate-dashboard/{__version__}"},
                follow_redirects=True,
            )
        return self._client

    def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "BoeFetcher":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def fetch_xml(self) -> str:
        """Download the raw XML export for the configured series."""
        logger.info(f"Fetching {self.settings.series_code} from Bank of England...")
        try:
            response = self.client.get(BOE_FEED_URL, params=self.settings.feed_params())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"Bank of England returned status {status}")
            raise FeedUnavailableError(
                f"Failed to fetch data from Bank of England (Status: {status})",
                details=e.response.reason_phrase,
                status_code=status,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Error fetching {self.settings.series_code}: {e}")
            raise FeedUnavailableError(
                "Failed to fetch data from Bank of England", details=str(e)
            ) from e

        return response.text

    def fetch_series(self) -> RateSeries:
        """
        Fetch and normalize the rate history.

        Raises:
            FeedError: on transport failure, an unusable body, or no data
        """
        text = self.fetch_xml()
        validate_payload(text)
        document = parse_xml(text)

        series = normalize_document(document, self.settings.series_code)
        if series is None:
            logger.error(
                f"Could not find observations. Parsed structure: "
                f"{json.dumps(document)[:2000]}"
            )
            raise NoObservationsError(
                "No observations found in the XML data",
                details="The XML structure may have changed. Check server logs for details.",
            )
        if series.is_empty:
            raise NoObservationsError(
                "No valid data points found after parsing observations"
            )

        logger.info(
            f"  {len(series.points)} observations, {len(series.changes_only)} rate changes"
        )
        return series


def main() -> None:
    """CLI entry point for fetching the rate history."""
    import argparse
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Fetch Bank of England Bank Rate history")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the normalized series as JSON",
    )
    parser.add_argument(
        "--changes",
        action="store_true",
        help="Print every rate change",
    )
    args = parser.parse_args()

    try:
        with BoeFetcher() as fetcher:
            series = fetcher.fetch_series()
    except ValueError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)
    except FeedError as e:
        print(f"Feed error: {e.message}" + (f" ({e.details})" if e.details else ""))
        sys.exit(1)

    if args.json:
        print(json.dumps(series.to_dict(), indent=2))
        return

    if args.changes:
        print(f"\n{series.series_code} rate changes:")
        print("-" * 30)
        for point in series.changes_only:
            print(f"{point.date:12} | {point.value:6.2f}%")
        return

    print(f"\n{series.series_code}: {len(series.points)} observations, "
          f"{len(series.changes_only)} changes")
    if series.latest:
        print(f"Latest: {series.latest.value:.2f}% as of {series.latest.date}")


if __name__ == "__main__":
    main()
