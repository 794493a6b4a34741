"""GPX track loading."""

import codecs
import re
from math import isfinite
from pathlib import Path
from typing import List, Tuple

import gpxpy
import gpxpy.gpx

from .errors import EmptyRouteError, TrackParseError
from .models import RawTrackPoint, Route
from .route import build_route

XML_DECLARATION = re.compile(rb'^\s*<\?xml[^>]*\?>')
DECLARED_ENCODING = re.compile(rb'encoding\s*=\s*["\']([A-Za-z0-9._-]+)["\']')


def read_gpx_text(gpx_file: Path) -> str:
    """
    Read a GPX file as text using the encoding its XML declaration names.

    The declaration is dropped from the returned text so the XML parser does
    not re-apply it. Files without a declared encoding are read as UTF-8.

    Raises:
        TrackParseError: If the bytes do not decode with that encoding
    """
    with open(gpx_file, 'rb') as f:
        raw = f.read()

    if raw.startswith(codecs.BOM_UTF8):
        raw = raw[len(codecs.BOM_UTF8):]

    encoding = 'utf-8'
    declaration = XML_DECLARATION.match(raw)
    if declaration:
        declared = DECLARED_ENCODING.search(declaration.group(0))
        if declared:
            encoding = declared.group(1).decode('ascii')
        raw = raw[declaration.end():]

    try:
        return raw.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise TrackParseError(f"Cannot decode GPX file {gpx_file} as {encoding}: {e}") from e


def load_gpx_track(gpx_file) -> Tuple[str, List[RawTrackPoint]]:
    """
    Load and parse the first track of a GPX file.

    Args:
        gpx_file: Path to GPX file

    Returns:
        Tuple of (route name, list of RawTrackPoint). Points missing an
        elevation get 0; points with non-finite values are skipped.

    Raises:
        TrackParseError: If the file cannot be decoded or is not valid GPX
    """
    gpx_file = Path(gpx_file)

    text = read_gpx_text(gpx_file)
    try:
        gpx = gpxpy.parse(text)
    except gpxpy.gpx.GPXException as e:
        raise TrackParseError(f"Invalid GPX file {gpx_file}: {e}") from e

    name = gpx.name or gpx_file.stem
    points = []

    if gpx.tracks:
        track = gpx.tracks[0]
        name = track.name or name
        for segment in track.segments:
            for point in segment.points:
                ele = point.elevation if point.elevation is not None else 0.0
                if all(isfinite(v) for v in (point.latitude, point.longitude, ele)):
                    points.append(RawTrackPoint(point.latitude, point.longitude, float(ele)))

    return name, points


def load_route(gpx_file) -> Route:
    """
    Load a GPX file into a Route.

    Raises:
        EmptyRouteError: If no track points found in GPX file
    """
    name, points = load_gpx_track(gpx_file)
    if not points:
        raise EmptyRouteError(f"No track points found in GPX file: {gpx_file}")
    return build_route(name, points)
