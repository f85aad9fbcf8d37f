"""Derive removed material by comparing an outer contour to its stock rectangle."""
from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from dstv_blocks.config import DecoderSettings
from dstv_blocks.features import Bounds, CutRegion, Point2D, ProfileContext

logger = logging.getLogger(__name__)

FLANGE_FACES = {"top_flange", "bottom_flange"}
WEB_FACES = {"web"}
NOTCH_EXTENSION_POINTS = 9


def _rectangle(min_x: float, min_y: float, max_x: float, max_y: float) -> tuple[Point2D, ...]:
    return (
        Point2D(min_x, min_y),
        Point2D(max_x, min_y),
        Point2D(max_x, max_y),
        Point2D(min_x, max_y),
        Point2D(min_x, min_y),
    )


def reference_bounds(
    face: str | None,
    context: ProfileContext | None,
    settings: DecoderSettings,
) -> Bounds:
    """Return the full stock rectangle for ``face`` before any material is removed."""

    if context is None:
        return Bounds(0.0, settings.default_length, 0.0, settings.default_height)

    length = context.length or settings.default_length
    width = context.width or settings.default_width
    height = context.height or settings.default_height
    if face in FLANGE_FACES:
        cross = width
    elif face in WEB_FACES:
        cross = height
    else:
        cross = max(width, height)
    return Bounds(0.0, length, 0.0, cross)


def cut_depth(face: str | None, context: ProfileContext | None, settings: DecoderSettings) -> float:
    """Material thickness to remove on ``face`` including the configured margin."""

    if context is None:
        return settings.fallback_cut_depth
    web = context.web_thickness or settings.default_web_thickness
    flange = context.flange_thickness or settings.default_flange_thickness
    if face in FLANGE_FACES:
        return flange * settings.cut_depth_margin
    if face in WEB_FACES:
        return web * settings.cut_depth_margin
    return min(web, flange) * settings.cut_depth_margin


def is_transverse(region: Bounds, context: ProfileContext | None, settings: DecoderSettings) -> bool:
    """A region near either end of the profile cuts across it."""

    length = (context.length if context else 0.0) or settings.default_length
    return region.min_x > length * 0.8 or region.max_x < length * 0.2


def _notch_extension_cuts(
    points: Sequence[Point2D], reference: Bounds, tolerance: float
) -> list[tuple[str, tuple[Point2D, ...]]]:
    xs = np.unique(np.round([p.x for p in points]))
    if len(xs) < 2:
        return []

    main_x = float(xs[-2])
    ext_x = float(xs[-1])
    extension = [p for p in points if p.x > main_x + tolerance]
    if len(extension) < 2:
        return []

    ys = [p.y for p in extension]
    low_y, high_y = min(ys), max(ys)
    cuts: list[tuple[str, tuple[Point2D, ...]]] = []
    if low_y > reference.min_y + tolerance:
        cuts.append(("high", _rectangle(main_x, reference.min_y, ext_x, low_y)))
    if high_y < reference.max_y - tolerance:
        cuts.append(("low", _rectangle(main_x, high_y, ext_x, reference.max_y)))
    return cuts


def derive_cut_regions(
    points: Sequence[Point2D],
    face: str | None,
    context: ProfileContext | None,
    settings: DecoderSettings,
) -> tuple[CutRegion, ...]:
    """Return rectangles of stock the contour no longer covers.

    Contours inset along X produce start and end cuts. Nine-point contours
    describing a notched extension produce high and low cuts instead when
    the extension's Y-range is inset from the stock.
    """

    if len(points) < 3:
        return ()

    reference = reference_bounds(face, context, settings)
    observed = Bounds.from_points(points)
    tolerance = settings.edge_tolerance

    raw: list[tuple[str, tuple[Point2D, ...]]] = []
    if len(points) == NOTCH_EXTENSION_POINTS:
        raw = _notch_extension_cuts(points, reference, tolerance)

    if not raw:
        if observed.min_x > reference.min_x + tolerance:
            raw.append(
                ("start", _rectangle(reference.min_x, reference.min_y, observed.min_x, reference.max_y))
            )
        if observed.max_x < reference.max_x - tolerance:
            raw.append(
                ("end", _rectangle(observed.max_x, reference.min_y, reference.max_x, reference.max_y))
            )

    depth = cut_depth(face, context, settings)
    regions: list[CutRegion] = []
    for label, region_points in raw:
        region_bounds = Bounds.from_points(region_points)
        regions.append(
            CutRegion(
                label=label,
                points=region_points,
                bounds=region_bounds,
                is_transverse=is_transverse(region_bounds, context, settings),
                depth=depth,
            )
        )
        logger.debug(
            "Derived %s cut region %.1fx%.1f on face %s",
            label,
            region_bounds.width,
            region_bounds.height,
            face,
        )
    return tuple(regions)


__all__ = ["cut_depth", "derive_cut_regions", "is_transverse", "reference_bounds"]
