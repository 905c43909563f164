"""
Test Configuration
==================

Fixtures building real GTFS-RT FeedMessage payloads.
"""

import pytest
from google.transit import gtfs_realtime_pb2


def build_feed(*entity_ids, version="2.0"):
    """Serialize a FeedMessage with one vehicle entity per id."""
    feed = gtfs_realtime_pb2.FeedMessage()
    feed.header.gtfs_realtime_version = version
    for entity_id in entity_ids:
        entity = feed.entity.add()
        entity.id = entity_id
        entity.vehicle.trip.trip_id = f"trip-{entity_id}"
        entity.vehicle.stop_id = f"stop-{entity_id}"
    return feed.SerializeToString()


def entity_dict(entity_id):
    """The decoded form of an entity built by build_feed()."""
    return {
        "id": entity_id,
        "vehicle": {
            "trip": {"trip_id": f"trip-{entity_id}"},
            "stop_id": f"stop-{entity_id}",
        },
    }


@pytest.fixture
def empty_feed():
    """Feed with a header and no entities."""
    return build_feed()


@pytest.fixture
def two_entity_feed():
    return build_feed("e1", "e2")
