"""Tests for startup reconciliation."""

import pytest

from conftest import make_service
from models import IngressRef, KubernetesAPIError, ServiceKey
from resources.bootstrap import index_ingresses, reconcile


class TestIndexIngresses:
    """Tests for index_ingresses function."""

    def test_maps_backends_to_ingress(self):
        ingress = IngressRef("ns1", "web", ("api", "ui"))

        index = index_ingresses([ingress])

        assert index == {
            ServiceKey("ns1", "api"): ingress,
            ServiceKey("ns1", "ui"): ingress,
        }

    def test_first_ingress_wins(self):
        first = IngressRef("ns1", "api", ("api",))
        second = IngressRef("ns1", "api-extra", ("api",))

        index = index_ingresses([first, second])

        assert index[ServiceKey("ns1", "api")] is first

    def test_keys_use_ingress_namespace(self):
        index = index_ingresses(
            [IngressRef("ns1", "api", ("api",)), IngressRef("ns2", "api", ("api",))]
        )

        assert set(index) == {ServiceKey("ns1", "api"), ServiceKey("ns2", "api")}


class TestReconcile:
    """Tests for reconcile function."""

    def test_empty_cluster(self, client, config):
        inventory = reconcile(client, config)

        assert len(inventory) == 0
        client.create_ingress.assert_not_called()

    def test_creates_missing_ingress(self, client, config):
        client.list_services.return_value = [make_service()]

        inventory = reconcile(client, config)

        client.create_ingress.assert_called_once()
        spec = client.create_ingress.call_args.args[0]
        assert spec.host == "api.example.com"
        assert inventory.get(ServiceKey("ns1", "api")) == IngressRef("ns1", "api", ("api",))

    def test_keeps_existing_ingress(self, client, config):
        existing = IngressRef("ns1", "api", ("api",))
        client.list_services.return_value = [make_service()]
        client.list_ingresses.return_value = [existing]

        inventory = reconcile(client, config)

        client.create_ingress.assert_not_called()
        assert inventory.get(ServiceKey("ns1", "api")) == existing

    def test_ignores_non_public_services(self, client, config):
        client.list_services.return_value = [
            make_service("a", labels={}),
            make_service("b", labels={"public": "false"}),
            make_service("c", labels={"public": ""}),
        ]

        inventory = reconcile(client, config)

        client.create_ingress.assert_not_called()
        assert len(inventory) == 0

    def test_drops_ingress_of_no_longer_public_service(self, client, config):
        client.list_services.return_value = [
            make_service(labels={"public": "false"}),
            make_service("web", labels={}),
        ]
        client.list_ingresses.return_value = [
            IngressRef("ns1", "api", ("api",)),
            IngressRef("ns1", "web", ("web",)),
        ]

        inventory = reconcile(client, config)

        assert len(inventory) == 0
        client.create_ingress.assert_not_called()
        client.delete_ingress.assert_not_called()

    def test_ignores_ingress_without_service(self, client, config):
        client.list_ingresses.return_value = [IngressRef("ns1", "gone", ("gone",))]

        inventory = reconcile(client, config)

        assert len(inventory) == 0

    def test_ingress_in_other_namespace_does_not_count(self, client, config):
        client.list_services.return_value = [make_service()]
        client.list_ingresses.return_value = [IngressRef("ns2", "api", ("api",))]

        inventory = reconcile(client, config)

        client.create_ingress.assert_called_once()
        assert inventory.get(ServiceKey("ns1", "api")) == IngressRef("ns1", "api", ("api",))

    def test_mixed_snapshot(self, client, config):
        client.list_services.return_value = [
            make_service("a"),
            make_service("b"),
            make_service("c", labels={"public": "false"}),
            make_service("d", labels={}),
        ]
        client.list_ingresses.return_value = [
            IngressRef("ns1", "a", ("a",)),
            IngressRef("ns1", "c", ("c",)),
        ]

        inventory = reconcile(client, config)

        assert set(inventory.keys()) == {ServiceKey("ns1", "a"), ServiceKey("ns1", "b")}
        assert client.create_ingress.call_count == 1

    def test_create_failure_aborts(self, client, config):
        client.list_services.return_value = [make_service("a"), make_service("b")]
        client.create_ingress.side_effect = KubernetesAPIError("boom", status=500)

        with pytest.raises(KubernetesAPIError):
            reconcile(client, config)

        assert client.create_ingress.call_count == 1

    def test_list_failure_propagates(self, client, config):
        client.list_ingresses.side_effect = KubernetesAPIError("forbidden", status=403)

        with pytest.raises(KubernetesAPIError):
            reconcile(client, config)
