"""
Tests for data models and their serialization helpers.
"""

import json
from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta

import pytest

from cdp_topology.models import (
    CrawlResult,
    LinkDetail,
    NeighborLink,
    count_links,
    graph_from_dict,
    graph_to_dict,
)


class TestNeighborLink:

    def test_defaults_are_uncorrelated(self):
        link = NeighborLink(local_port_id=1)
        assert link.is_correlated is False
        assert link.remote_port_id is None
        assert link.is_lag is False

    def test_graph_round_trip(self):
        graph = {
            "R1": {"R2": [
                NeighborLink(1, "Gi1/0/1", "GigabitEthernet1/0/1", "GigabitEthernet1/0/3",
                             is_lag=True, lag_port_id=101, lag_port_name="Po1",
                             remote_port_id=107, remote_lag_port_id=107),
            ]},
            "R2": {},
        }
        data = json.loads(json.dumps(graph_to_dict(graph)))
        assert graph_from_dict(data) == graph


class TestLinkDetail:

    def test_frozen(self):
        detail = LinkDetail(remote_port="Gi0/1", is_lag=False, local_port_id=1)
        with pytest.raises(FrozenInstanceError):
            detail.remote_port = "Gi0/2"

    def test_individual_to_dict(self):
        detail = LinkDetail(remote_port="Gi0/1", is_lag=False, local_port_id=1, remote_port_id=5)
        assert detail.to_dict() == {
            'remote_port': "Gi0/1",
            'is_lag': False,
            'local_port_id': 1,
            'remote_port_id': 5,
        }

    def test_count_links(self):
        detail = LinkDetail(remote_port="x", is_lag=False, local_port_id=1)
        topology = {
            "A": {"B": {"p1": detail, "p2": detail}, "C": {"p3": detail}},
            "B": {"C": {"p4": detail}},
        }
        assert count_links(topology) == 4
        assert count_links({}) == 0


class TestCrawlResult:

    def test_duration(self):
        start = datetime(2024, 1, 1, 12, 0, 0)
        result = CrawlResult(seed="R1", started_at=start)
        assert result.duration_seconds is None

        result.completed_at = start + timedelta(seconds=90)
        assert result.duration_seconds == 90.0

    def test_to_dict(self):
        result = CrawlResult(seed="R1", total_attempted=2, successful=1, failed=1,
                             failures={"R9": "timeout"})
        data = result.to_dict()
        assert data['seed'] == "R1"
        assert data['failures'] == {"R9": "timeout"}
        assert data['started_at'] is None
        json.dumps(data)
