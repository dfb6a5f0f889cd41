"""
Hetzner Cloud catalog

Read-only access to locations, server types, datacenters and images via the
Hetzner Cloud REST API, plus the pure filters that turn the raw catalog into
the choices offered to the operator.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

import requests

from jenkinsmaster.constants import (
    DEFAULT_HCLOUD_API_URL,
    HCLOUD_ARCHITECTURE,
    HCLOUD_IMAGE_TYPE,
    HCLOUD_PAGE_SIZE,
    HTTP_TIMEOUT,
)
from jenkinsmaster.exceptions import HetznerAPIError


@dataclass(frozen=True)
class Location:
    name: str
    description: str = ""


@dataclass(frozen=True)
class ServerType:
    id: int
    name: str
    cores: int
    memory: float
    disk: int
    architecture: str
    deprecated: bool = False
    # location name -> gross monthly price
    monthly_prices: Dict[str, float] = field(default_factory=dict, hash=False)

    def label(self, location: str) -> str:
        """Menu label, e.g. 'cx22: 2 vCPUs, 4.00 GB RAM, 40 GB Disk, x86, €4.59/month'."""
        price = self.monthly_prices.get(location, 0.0)
        return (
            f"{self.name}: {self.cores} vCPUs, {self.memory:.2f} GB RAM, "
            f"{self.disk} GB Disk, {self.architecture}, €{price:.2f}/month"
        )

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ServerType":
        prices = {}
        for pricing in data.get("prices") or []:
            try:
                prices[pricing["location"]] = float(pricing["price_monthly"]["gross"])
            except (KeyError, TypeError, ValueError):
                continue

        return cls(
            id=data["id"],
            name=data["name"],
            cores=data.get("cores", 0),
            memory=float(data.get("memory", 0)),
            disk=data.get("disk", 0),
            architecture=data.get("architecture", ""),
            deprecated=bool(data.get("deprecation") or data.get("deprecated")),
            monthly_prices=prices,
        )


@dataclass(frozen=True)
class Datacenter:
    name: str
    location: str
    available_server_types: tuple[int, ...] = ()

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Datacenter":
        server_types = data.get("server_types") or {}
        return cls(
            name=data["name"],
            location=(data.get("location") or {}).get("name", ""),
            available_server_types=tuple(server_types.get("available") or ()),
        )


@dataclass(frozen=True)
class Image:
    name: Optional[str]
    type: str
    architecture: str
    deprecated: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Image":
        return cls(
            name=data.get("name"),
            type=data.get("type", ""),
            architecture=data.get("architecture", ""),
            deprecated=bool(data.get("deprecated")),
        )


class HetznerCatalog:
    """
    Client for the read-only parts of the Hetzner Cloud API.

    Raises HetznerAPIError for transport errors and non-2xx responses.
    """

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_HCLOUD_API_URL,
        session: Optional[requests.Session] = None,
        timeout: int = HTTP_TIMEOUT,
    ):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {token}"})

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.api_url}/{path.lstrip('/')}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise HetznerAPIError("Hetzner Cloud API request failed", context=str(e))

        if response.status_code != 200:
            try:
                detail = response.json().get("error", {}).get("message", response.text)
            except ValueError:
                detail = response.text
            raise HetznerAPIError(
                f"Hetzner Cloud API returned {response.status_code} for /{path}",
                context=detail,
            )
        return response.json()

    def _get_all(self, path: str, key: str, params: Optional[Dict[str, Any]] = None) -> list:
        """Follow pagination and return every item under key."""
        items = []
        page = 1

        while page:
            query = dict(params or {})
            query.update({"page": page, "per_page": HCLOUD_PAGE_SIZE})
            data = self._get(path, query)
            items.extend(data.get(key) or [])
            pagination = (data.get("meta") or {}).get("pagination") or {}
            page = pagination.get("next_page")

        return items

    def validate_token(self) -> None:
        """
        Make one cheap read-only call with the token.

        Raises:
            HetznerAPIError: If the token is rejected or the API is unreachable
        """
        self._get("server_types", {"per_page": 1})

    def locations(self) -> list[Location]:
        return [
            Location(name=loc["name"], description=loc.get("description", ""))
            for loc in self._get_all("locations", "locations")
        ]

    def server_types(self) -> list[ServerType]:
        return [ServerType.from_api(st) for st in self._get_all("server_types", "server_types")]

    def datacenters(self) -> list[Datacenter]:
        return [Datacenter.from_api(dc) for dc in self._get_all("datacenters", "datacenters")]

    def images(self) -> list[Image]:
        return [
            Image.from_api(img)
            for img in self._get_all(
                "images",
                "images",
                {"type": HCLOUD_IMAGE_TYPE, "architecture": HCLOUD_ARCHITECTURE},
            )
        ]


def location_names(locations: Iterable[Location]) -> list[str]:
    """Sorted unique location names."""
    return sorted({loc.name for loc in locations})


def available_server_types(
    server_types: Iterable[ServerType],
    datacenters: Iterable[Datacenter],
    location: str,
) -> list[tuple[str, str]]:
    """
    Server types that can be ordered in a location.

    Deprecated types and types no datacenter in the location lists as
    available are dropped.

    Returns:
        (label, server type name) pairs sorted by label
    """
    by_id = {st.id: st for st in server_types if not st.deprecated}

    available_ids = set()
    for dc in datacenters:
        if dc.location == location:
            available_ids.update(dc.available_server_types)

    choices = [
        (by_id[st_id].label(location), by_id[st_id].name)
        for st_id in available_ids
        if st_id in by_id
    ]
    return sorted(choices)


def system_image_names(images: Iterable[Image]) -> list[str]:
    """Names of current x86 system images, sorted and de-duplicated."""
    return sorted(
        {
            img.name
            for img in images
            if img.name
            and img.type == HCLOUD_IMAGE_TYPE
            and img.architecture == HCLOUD_ARCHITECTURE
            and not img.deprecated
        }
    )
