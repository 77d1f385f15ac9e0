"""
geolocation/aggregator.py

Multi-source GPS merging and heatmap bucketing.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from functools import cmp_to_key
from typing import Iterable, Sequence

from catalog.timestamps import parse_timestamp
from geolocation.types import SOURCE_GPS_LOG, SOURCE_METADATA, GPSPoint, HeatmapBucket

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 4


def compare_timestamps(left: GPSPoint, right: GPSPoint) -> int:
    """
    Order two points by timestamp when both carry a parseable one.

    Any pair with a missing or unparseable side compares equal, so a stable
    sort keeps such points where they were. The resulting order is not total.
    """

    if not left.timestamp or not right.timestamp:
        return 0
    left_time = parse_timestamp(left.timestamp)
    right_time = parse_timestamp(right.timestamp)
    if left_time is None or right_time is None:
        return 0
    if left_time < right_time:
        return -1
    if left_time > right_time:
        return 1
    return 0


def round_coordinate(value: float, precision: int) -> float:
    """
    Round half-up to *precision* decimal digits.
    """

    quantum = Decimal(1).scaleb(-precision)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def filter_points(
    points: Iterable[GPSPoint],
    *,
    session: str | None = None,
    camera: str | None = None,
    anomaly_type: str | None = None,
) -> list[GPSPoint]:
    """
    Keep points whose provenance matches every given value exactly.
    """

    return [
        point
        for point in points
        if (session is None or point.session == session)
        and (camera is None or point.camera == camera)
        and (anomaly_type is None or point.anomaly_type == anomaly_type)
    ]


class GPSAggregator:
    """
    Combines GPS points from the GPS log and the metadata tables.
    """

    def merge_sources(
        self,
        primary_log_points: Sequence[GPSPoint],
        metadata_points: Sequence[GPSPoint],
    ) -> list[GPSPoint]:
        """
        Tag each point with its source and sort best-effort by timestamp.

        Log points come first before sorting, so undated points keep that
        relative order.
        """

        combined = [point.with_source(SOURCE_GPS_LOG) for point in primary_log_points]
        combined.extend(point.with_source(SOURCE_METADATA) for point in metadata_points)
        combined.sort(key=cmp_to_key(compare_timestamps))
        logger.debug(
            "Merged %d log points and %d metadata points",
            len(primary_log_points),
            len(metadata_points),
        )
        return combined

    def bucket_for_heatmap(
        self,
        points: Iterable[GPSPoint],
        precision: int = DEFAULT_PRECISION,
        *,
        session: str | None = None,
        camera: str | None = None,
        anomaly_type: str | None = None,
    ) -> list[HeatmapBucket]:
        """
        Group points into cells of rounded latitude and longitude.

        Bucket order follows first appearance and is not part of the contract.
        """

        if precision < 0:
            raise ValueError("precision must be non-negative.")

        selected = filter_points(points, session=session, camera=camera, anomaly_type=anomaly_type)
        counts: dict[tuple[float, float], int] = defaultdict(int)
        sessions: dict[tuple[float, float], set[str]] = defaultdict(set)
        cameras: dict[tuple[float, float], set[str]] = defaultdict(set)
        anomaly_types: dict[tuple[float, float], set[str]] = defaultdict(set)

        for point in selected:
            key = (
                round_coordinate(point.latitude, precision),
                round_coordinate(point.longitude, precision),
            )
            counts[key] += 1
            sessions[key].add(point.session)
            cameras[key].add(point.camera)
            anomaly_types[key].add(point.anomaly_type)

        return [
            HeatmapBucket(
                latitude=latitude,
                longitude=longitude,
                count=count,
                sessions=frozenset(sessions[(latitude, longitude)]),
                cameras=frozenset(cameras[(latitude, longitude)]),
                anomaly_types=frozenset(anomaly_types[(latitude, longitude)]),
            )
            for (latitude, longitude), count in counts.items()
        ]
