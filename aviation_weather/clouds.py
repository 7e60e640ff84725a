"""Cloud layer parsing for structured and METAR-style sky condition entries."""

import logging
import re
from collections.abc import Mapping
from typing import Any, Optional, Tuple

from aviation_weather.models import CloudCover, CloudLayer
from aviation_weather.normalize import coerce_int, coerce_text

logger = logging.getLogger(__name__)

COVER_KEYS = ('cover', 'skyCover', 'sky_cover', 'type')

# (key, multiplier to feet); first present key wins
BASE_KEYS = (
    ('base', 1),
    ('cloud_base_ft_agl', 1),
    ('base_feet_agl', 1),
    ('altitude', 100),
)

TYPE_KEYS = ('cloudType', 'cloud_type', 'modifier')

_CONVECTIVE_TYPES = ('CB', 'TCU')

_GROUP_PATTERN = re.compile(r'^(FEW|SCT|BKN|OVC|CLR|SKC)(\d{3})?(CB|TCU)?$')


def parse_cloud_layers(entries: Any) -> Tuple[CloudLayer, ...]:
    """
    Convert raw cloud entries to canonical cloud layers.

    Entries are mappings (cover code plus an optional base) or METAR
    groups such as "BKN020CB". Input order is preserved.

    Args:
        entries: Sequence of raw entries

    Returns:
        Tuple of CloudLayer, one per entry
    """
    if not isinstance(entries, (list, tuple)):
        return ()

    layers = []
    for entry in entries:
        if isinstance(entry, str):
            layers.append(_layer_from_group(entry))
        elif isinstance(entry, Mapping):
            layers.append(_layer_from_mapping(entry))
        else:
            logger.debug("Ignoring cloud entry of type %s", type(entry).__name__)
    return tuple(layers)


def normalize_cover(raw: Any) -> CloudCover:
    """Map a cover code to CloudCover; unknown or missing codes become CLR."""
    text = coerce_text(raw)
    if text is None:
        return CloudCover.CLR
    try:
        return CloudCover(text.upper())
    except ValueError:
        logger.debug("Unrecognized cloud cover %r, using CLR", raw)
        return CloudCover.CLR


def make_layer(cover: CloudCover, base_ft: Optional[int], cloud_type: Optional[str] = None) -> CloudLayer:
    """Build a layer, dropping any altitude on clear-sky codes."""
    if cover.is_clear:
        return CloudLayer(cover=cover)
    return CloudLayer(cover=cover, base_ft=base_ft, cloud_type=cloud_type)


def _layer_from_mapping(entry: Mapping) -> CloudLayer:
    cover = CloudCover.CLR
    for key in COVER_KEYS:
        if coerce_text(entry.get(key)) is not None:
            cover = normalize_cover(entry[key])
            break

    base_ft = None
    for key, scale in BASE_KEYS:
        value = entry.get(key)
        if value is None or value == '':
            continue
        base = coerce_int(value)
        base_ft = base * scale if base is not None else None
        break

    cloud_type = None
    for key in TYPE_KEYS:
        text = coerce_text(entry.get(key))
        if text is not None and text.upper() in _CONVECTIVE_TYPES:
            cloud_type = text.upper()
            break

    return make_layer(cover, base_ft, cloud_type)


def _layer_from_group(group: str) -> CloudLayer:
    match = _GROUP_PATTERN.match(group.strip().upper())
    if not match:
        logger.debug("Unrecognized cloud group %r, using CLR", group)
        return CloudLayer(cover=CloudCover.CLR)
    cover = CloudCover(match.group(1))
    base_ft = int(match.group(2)) * 100 if match.group(2) else None
    return make_layer(cover, base_ft, match.group(3))
