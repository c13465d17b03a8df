"""Tests for Ingress construction."""

from conftest import make_service
from models import IngressBackend, IngressRef
from resources.ingress import (
    build_backend,
    build_ingress,
    create_ingress_for_service,
    make_host,
)


class TestMakeHost:
    """Tests for make_host function."""

    def test_joins_name_and_domain(self):
        assert make_host("api", "example.com") == "api.example.com"


class TestBuildBackend:
    """Tests for build_backend function."""

    def test_uses_first_port(self):
        service = make_service(ports=(8080, 9090))

        assert build_backend(service) == IngressBackend(service_name="api", port=8080)

    def test_no_ports_gives_empty_backend(self):
        service = make_service(ports=())

        assert build_backend(service) == IngressBackend(service_name="", port=None)


class TestBuildIngress:
    """Tests for build_ingress function."""

    def test_public_service(self, config):
        spec = build_ingress(make_service(), config)

        assert spec.name == "api"
        assert spec.namespace == "ns1"
        assert spec.host == "api.example.com"
        assert spec.path == "/"
        assert spec.tls_secret == "tls-default"
        assert spec.backend == IngressBackend(service_name="api", port=8080)

    def test_manifest(self, config):
        body = build_ingress(make_service(), config).to_dict()

        rule = body["spec"]["rules"][0]
        assert rule["host"] == "api.example.com"
        assert rule["http"]["paths"][0]["path"] == "/"
        assert rule["http"]["paths"][0]["backend"] == {
            "service": {"name": "api", "port": {"number": 8080}}
        }
        assert body["spec"]["tls"] == [
            {"hosts": ["api.example.com"], "secretName": "tls-default"}
        ]

    def test_zero_ports_still_builds(self, config):
        spec = build_ingress(make_service(ports=()), config)

        assert spec.host == "api.example.com"
        assert spec.backend.service_name == ""
        assert spec.backend.port is None

    def test_deterministic(self, config):
        service = make_service()

        assert build_ingress(service, config) == build_ingress(service, config)


class TestCreateIngressForService:
    """Tests for create_ingress_for_service function."""

    def test_submits_built_spec(self, client, config):
        service = make_service()

        ref = create_ingress_for_service(client, service, config)

        client.create_ingress.assert_called_once_with(build_ingress(service, config))
        assert ref == IngressRef("ns1", "api", ("api",))
