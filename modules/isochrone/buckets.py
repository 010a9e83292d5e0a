import logging
from typing import List

from core.exceptions import InsufficientBucketPoints, SearchTooExpensive

from .contracts import Bucket, SearchHandle

logger = logging.getLogger(__name__)

MIN_BUCKET_POINTS = 2


def partition_buckets(
    handle: SearchHandle,
    node_id: int,
    bucket_count: int,
    max_visited_nodes: int,
) -> List[Bucket]:
    """
    Fetch the `bucket_count + 1` boundary point lists (the last one is the
    frontier past the limit) and check they can be turned into isolines.
    """
    buckets = handle.bucketed_gps(node_id, bucket_count)

    visited = handle.visited_node_count()
    max_allowed = max_visited_nodes // 5
    if visited > max_allowed:
        logger.warning("Isochrone search visited %d nodes, limit is %d", visited, max_allowed)
        raise SearchTooExpensive(visited, max_allowed)

    for index, bucket in enumerate(buckets):
        if len(bucket) < MIN_BUCKET_POINTS:
            raise InsufficientBucketPoints(index, len(bucket))

    return buckets
