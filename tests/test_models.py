"""Tests for cluster models."""

import pytest

from kms_cluster.cluster.models import ClusterNode, ClusterStatus, normalize_endpoint


class TestNormalizeEndpoint:
    @pytest.mark.parametrize("endpoint, expected", [
        ("https://kms-1:7373", "kms-1:7373"),
        ("kms-1:7373", "kms-1:7373"),
        ("https://kms-1:7373/", "kms-1:7373"),
        ("http://kms-1:7373", "http://kms-1:7373"),
    ])
    def test_strips_https_scheme(self, endpoint, expected):
        assert normalize_endpoint(endpoint) == expected


class TestClusterStatus:
    def test_single_node_is_standalone(self):
        status = ClusterStatus(nodes_up=[ClusterNode(id=0, host="a")])
        assert status.size == 1
        assert status.is_standalone

    def test_down_nodes_count_towards_size(self):
        status = ClusterStatus(nodes_up=[ClusterNode(id=0, host="a")], nodes_down=["b"])
        assert status.size == 2
        assert not status.is_standalone

    def test_hosts_are_normalized(self):
        status = ClusterStatus(nodes_up=[ClusterNode(id=0, host="https://a")], nodes_down=["https://b"])
        assert list(status.hosts()) == ["a", "b"]

    def test_from_dict_tolerates_missing_lists(self):
        status = ClusterStatus.from_dict({"nodes_up": [{"id": 3, "host": "a"}], "nodes_down": None})
        assert status.nodes_up == [ClusterNode(id=3, host="a")]
        assert status.nodes_down == []

    def test_from_dict_requires_host(self):
        with pytest.raises(KeyError):
            ClusterStatus.from_dict({"nodes_up": [{"id": 0}]})

    def test_to_dict(self):
        status = ClusterStatus(nodes_up=[ClusterNode(id=1, host="a")], nodes_down=["b"])
        assert status.to_dict() == {"nodes_up": [{"id": 1, "host": "a"}], "nodes_down": ["b"]}

    def test_frozen(self):
        status = ClusterStatus()
        with pytest.raises(AttributeError):
            status.nodes_down = ["x"]  # type: ignore
