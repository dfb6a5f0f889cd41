"""Tests for the Hetzner Cloud catalog client and filters."""

from unittest.mock import MagicMock

import pytest
import requests

from jenkinsmaster.exceptions import HetznerAPIError
from jenkinsmaster.providers.hetzner_catalog import (
    Datacenter,
    HetznerCatalog,
    Image,
    Location,
    ServerType,
    available_server_types,
    location_names,
    system_image_names,
)


def _response(payload, status_code=200):
    response = MagicMock(status_code=status_code, text="error")
    response.json.return_value = payload
    return response


def _catalog(*responses):
    session = MagicMock()
    session.headers = {}
    session.get.side_effect = list(responses)
    return HetznerCatalog("secret-token", api_url="https://api.test/v1/", session=session), session


SERVER_TYPE_API = {
    "id": 22,
    "name": "cx22",
    "cores": 2,
    "memory": 4.0,
    "disk": 40,
    "architecture": "x86",
    "deprecation": None,
    "prices": [
        {"location": "fsn1", "price_monthly": {"net": "3.8571", "gross": "4.5900"}},
        {"location": "hel1", "price_monthly": {"net": "3.8571", "gross": "4.5900"}},
    ],
}


class TestHetznerCatalogClient:
    def test_bearer_token(self):
        catalog, session = _catalog()
        assert session.headers["Authorization"] == "Bearer secret-token"
        assert catalog.api_url == "https://api.test/v1"

    def test_follows_pagination(self):
        catalog, session = _catalog(
            _response(
                {
                    "locations": [{"name": "fsn1"}, {"name": "nbg1"}],
                    "meta": {"pagination": {"page": 1, "next_page": 2}},
                }
            ),
            _response(
                {
                    "locations": [{"name": "hel1", "description": "Helsinki"}],
                    "meta": {"pagination": {"page": 2, "next_page": None}},
                }
            ),
        )

        locations = catalog.locations()

        assert [loc.name for loc in locations] == ["fsn1", "nbg1", "hel1"]
        assert session.get.call_count == 2
        first, second = session.get.call_args_list
        assert first.args[0] == "https://api.test/v1/locations"
        assert first.kwargs["params"] == {"page": 1, "per_page": 50}
        assert second.kwargs["params"]["page"] == 2

    def test_images_filtered_server_side(self):
        catalog, session = _catalog(
            _response({"images": [{"name": "ubuntu-24.04", "type": "system", "architecture": "x86"}]})
        )
        images = catalog.images()

        assert images == [Image("ubuntu-24.04", "system", "x86")]
        params = session.get.call_args.kwargs["params"]
        assert params["type"] == "system"
        assert params["architecture"] == "x86"

    def test_server_types_parsed(self):
        catalog, _ = _catalog(_response({"server_types": [SERVER_TYPE_API]}))
        (server_type,) = catalog.server_types()

        assert server_type.name == "cx22"
        assert not server_type.deprecated
        assert server_type.monthly_prices["fsn1"] == pytest.approx(4.59)

    def test_datacenters_parsed(self):
        catalog, _ = _catalog(
            _response(
                {
                    "datacenters": [
                        {
                            "name": "fsn1-dc14",
                            "location": {"name": "fsn1"},
                            "server_types": {"supported": [1, 22], "available": [22]},
                        }
                    ]
                }
            )
        )
        assert catalog.datacenters() == [Datacenter("fsn1-dc14", "fsn1", (22,))]

    def test_validate_token_rejected(self):
        catalog, _ = _catalog(
            _response({"error": {"code": "unauthorized", "message": "unable to authenticate"}}, 401)
        )

        with pytest.raises(HetznerAPIError) as exc_info:
            catalog.validate_token()

        assert "401" in exc_info.value.message
        assert exc_info.value.context == "unable to authenticate"

    def test_validate_token_single_cheap_call(self):
        catalog, session = _catalog(_response({"server_types": []}))
        catalog.validate_token()

        assert session.get.call_count == 1
        assert session.get.call_args.kwargs["params"] == {"per_page": 1}

    def test_transport_error(self):
        catalog, _ = _catalog(requests.ConnectionError("offline"))
        with pytest.raises(HetznerAPIError, match="request failed"):
            catalog.locations()


class TestFilters:
    def test_location_names_sorted_unique(self):
        locations = [Location("nbg1"), Location("fsn1"), Location("hel1"), Location("fsn1")]
        assert location_names(locations) == ["fsn1", "hel1", "nbg1"]

    def test_available_server_types(self):
        server_types = [
            ServerType(1, "cx32", 4, 8.0, 80, "x86", monthly_prices={"fsn1": 7.05}),
            ServerType(2, "cx22", 2, 4.0, 40, "x86", monthly_prices={"fsn1": 4.59}),
            ServerType(3, "cx11", 1, 2.0, 20, "x86", deprecated=True),
            ServerType(4, "cax11", 2, 4.0, 40, "arm", monthly_prices={"fsn1": 3.95}),
        ]
        datacenters = [
            Datacenter("fsn1-dc14", "fsn1", (1, 2, 3)),
            Datacenter("nbg1-dc3", "nbg1", (4,)),
        ]

        choices = available_server_types(server_types, datacenters, "fsn1")

        assert choices == [
            ("cx22: 2 vCPUs, 4.00 GB RAM, 40 GB Disk, x86, €4.59/month", "cx22"),
            ("cx32: 4 vCPUs, 8.00 GB RAM, 80 GB Disk, x86, €7.05/month", "cx32"),
        ]

    def test_no_server_types_for_location(self):
        datacenters = [Datacenter("hel1-dc2", "hel1", ())]
        server_types = [ServerType(1, "cx22", 2, 4.0, 40, "x86")]
        assert available_server_types(server_types, datacenters, "hel1") == []
        assert available_server_types(server_types, datacenters, "ash") == []

    def test_system_image_names(self):
        images = [
            Image("ubuntu-24.04", "system", "x86"),
            Image("debian-12", "system", "x86"),
            Image("ubuntu-24.04", "system", "x86"),
            Image("ubuntu-24.04", "system", "arm"),
            Image("centos-7", "system", "x86", deprecated=True),
            Image("my-snapshot", "snapshot", "x86"),
            Image(None, "system", "x86"),
        ]
        assert system_image_names(images) == ["debian-12", "ubuntu-24.04"]
