"""
Normalize loosely structured rate feeds into an ordered observation series.

The feed is parsed into a generic tree of dicts, lists and strings before it
gets here. Element attributes appear as keys with an "@" prefix, child
elements as plain keys. The same data shows up in different shapes depending
on the feed dialect:

1. Envelope/Cube/Cube: Bank of England IADB export. An outer Cube per series
   wraps the point Cubes, which carry TIME and OBS_VALUE attributes.
2. Envelope/message/DataSet/Series/Obs: SDMX style, points carry TIME_PERIOD.
3. A bare Cube list at the top of the document.

Every lookup returns None for a missing shape; nothing in here raises on
malformed input.
"""

import logging
import math
import re
from typing import Any, Iterable

from bank_rate_dashboard.models import Observation, RateSeries


logger = logging.getLogger(__name__)

Node = dict | list | str | None

ATTRIBUTE_PREFIX = "@"
TEXT_KEY = "#text"
MAX_SEARCH_DEPTH = 5

CUBE_KEYS = ("Cube", "cube")
ENVELOPE_KEYS = ("Envelope", "envelope")
MESSAGE_KEYS = ("message", "Message")
DATASET_KEYS = ("DataSet", "dataset", "dataSet")
SERIES_KEYS = ("Series", "series")
OBS_KEYS = ("Obs", "obs")

DATE_FIELDS = ("TIME_PERIOD", "TIME")
VALUE_FIELD = "OBS_VALUE"

# Leading numeric prefix, so "5.25 " and "5.25%" still parse
_NUMBER_PREFIX = re.compile(
    r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else [value]


def _first_present(node: Any, keys: Iterable[str]) -> Any:
    """Value of the first key variant that is present on a dict node."""
    if not isinstance(node, dict):
        return None
    for key in keys:
        value = node.get(key)
        if _present(value):
            return value
    return None


def find_cubes_recursive(node: Node, depth: int = 0) -> list:
    """
    Collect every Cube/cube entry in a subtree, depth first.

    Only dict children are descended into. Search stops below
    MAX_SEARCH_DEPTH levels.
    """
    if depth > MAX_SEARCH_DEPTH or not isinstance(node, dict):
        return []

    cubes: list = []
    for key in CUBE_KEYS:
        value = node.get(key)
        if _present(value):
            cubes.extend(_as_list(value))

    for value in node.values():
        if isinstance(value, dict):
            cubes.extend(find_cubes_recursive(value, depth + 1))

    return cubes


def _find_sdmx_obs(envelope: dict) -> Any:
    message = _first_present(envelope, MESSAGE_KEYS)
    dataset = _first_present(message, DATASET_KEYS)
    series = _first_present(dataset, SERIES_KEYS)
    if not isinstance(series, dict):
        return None
    return _first_present(series, OBS_KEYS)


def find_observations(document: Node) -> list | None:
    """
    Locate the raw observation nodes in a parsed feed document.

    Strategies are tried in order and the first one that finds anything wins.

    Returns:
        List of raw nodes, or None if no candidate container exists
    """
    if not isinstance(document, dict):
        return None

    logger.debug(f"Document top-level keys: {list(document.keys())}")

    envelope = _first_present(document, ENVELOPE_KEYS)
    if isinstance(envelope, dict):
        cube = _first_present(envelope, CUBE_KEYS)
        if cube is not None:
            logger.debug("Observations found directly under envelope")
            return _as_list(cube)

        cubes = find_cubes_recursive(envelope)
        if cubes:
            logger.debug(f"Found {len(cubes)} nested cubes under envelope")
            return cubes

        obs = _find_sdmx_obs(envelope)
        if obs is not None:
            logger.debug("Observations found in message/DataSet/Series/Obs")
            return _as_list(obs)

    for key in CUBE_KEYS:
        if isinstance(document.get(key), list):
            logger.debug(f"Observations found in top-level {key} list")
            return document[key]

    cubes = find_cubes_recursive(document)
    if cubes:
        logger.debug(f"Found {len(cubes)} cubes searching from document root")
        return cubes

    return None


def extract_field(node: Node, name: str) -> str | None:
    """
    Read a field from a point node.

    The attribute form ("@" + name) wins over a child element of the same
    name. A child element that carries attributes of its own contributes its
    text content.
    """
    if not isinstance(node, dict):
        return None

    for key in (ATTRIBUTE_PREFIX + name, name):
        value = node.get(key)
        if isinstance(value, dict):
            value = value.get(TEXT_KEY)
        if value is None or isinstance(value, (dict, list)):
            continue
        return str(value)

    return None


def parse_value(text: str) -> float:
    """Parse the leading number of a feed value; NaN when there is none."""
    match = _NUMBER_PREFIX.match(text)
    if match is None:
        return float("nan")
    return float(match.group(1).replace("Infinity", "inf"))


def _candidates(node: dict) -> list:
    """Point nodes held by a raw node: its cube children, or the node itself."""
    cube = _first_present(node, CUBE_KEYS)
    if cube is None:
        cube = next(
            (v for k, v in node.items() if k.casefold() == "cube" and _present(v)),
            None,
        )
    if cube is None:
        return [node]
    return [c for c in _as_list(cube) if isinstance(c, dict)]


def _resolve_date(candidate: dict) -> str | None:
    for name in DATE_FIELDS:
        value = extract_field(candidate, name)
        if value:
            return value
    return None


def parse_observations(nodes: Iterable[Any]) -> list[Observation]:
    """
    Turn raw nodes into observations sorted by date.

    A candidate needs both a date and a value. The first node seen for a date
    wins. Values that do not parse are kept as NaN.
    """
    points: list[Observation] = []
    seen_dates: set[str] = set()

    for node in nodes:
        if not isinstance(node, dict):
            continue

        for candidate in _candidates(node):
            obs_date = _resolve_date(candidate)
            raw_value = extract_field(candidate, VALUE_FIELD)
            if not obs_date or not raw_value:
                continue
            if obs_date in seen_dates:
                continue

            seen_dates.add(obs_date)
            points.append(Observation(date=obs_date, value=parse_value(raw_value)))

    # ISO dates sort correctly as strings
    points.sort(key=lambda p: p.date)

    bad = sum(1 for p in points if math.isnan(p.value))
    if bad:
        logger.warning(f"{bad} observations have unparseable values (kept as NaN)")

    return points


def changes_only(points: list[Observation]) -> list[Observation]:
    """
    First point plus every point whose value differs from the point before it.

    Comparison is against the previous point of the full series, with exact
    inequality.
    """
    if not points:
        return []

    changes = [points[0]]
    for previous, current in zip(points, points[1:]):
        if current.value != previous.value:
            changes.append(current)

    return changes


def normalize_document(document: Node, series_code: str) -> RateSeries | None:
    """
    Build a RateSeries from a parsed feed document.

    Returns:
        None when no observation container was found. A series with no
        points when containers exist but hold no usable observations.
    """
    raw_nodes = find_observations(document)
    if not raw_nodes:
        return None

    logger.debug(f"Parsing {len(raw_nodes)} raw observation nodes")
    points = parse_observations(raw_nodes)
    changes = changes_only(points)

    return RateSeries(
        series_code=series_code,
        points=tuple(points),
        changes_only=tuple(changes),
        latest=changes[-1] if changes else None,
    )
