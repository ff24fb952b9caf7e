"""Configuration model for GCP infrastructure.

Mirrors the provider config of an Infrastructure resource plus the facts the
chart needs from outside it (request, service account, cluster networking).
"""
from dataclasses import dataclass, field
from typing import Any, Optional
import json

SERVICE_ACCOUNT_SECRET_KEY = "serviceaccount.json"


@dataclass
class CloudRouter:
    """Reference to an existing cloud router."""
    name: str = ""


@dataclass
class VPC:
    """Reference to an existing VPC."""
    name: str
    cloud_router: Optional[CloudRouter] = None


@dataclass
class CloudNAT:
    """Cloud NAT tuning."""
    min_ports_per_vm: Optional[int] = None


@dataclass
class FlowLogs:
    """Flow log settings for the nodes subnet. Each leaf is independent."""
    aggregation_interval: Optional[str] = None
    flow_sampling: Optional[float] = None
    metadata: Optional[str] = None


@dataclass
class Networks:
    """Network layout of the infrastructure."""
    vpc: Optional[VPC] = None
    cloud_nat: Optional[CloudNAT] = None
    # Deprecated alias of `workers`
    worker: str = ""
    workers: str = ""
    internal: Optional[str] = None
    flow_logs: Optional[FlowLogs] = None

    @property
    def workers_cidr(self) -> str:
        """Worker CIDR, falling back to the deprecated `worker` field."""
        if self.workers:
            return self.workers
        return self.worker


@dataclass
class InfrastructureConfig:
    """Provider-specific infrastructure configuration."""
    networks: Networks = field(default_factory=Networks)
    api_version: str = "gcp.provider.extensions.gardener.cloud/v1alpha1"
    kind: str = "InfrastructureConfig"

    def existing_cloud_router_name(self) -> Optional[str]:
        """Name of the cloud router of a pre-existing VPC, if one is named."""
        vpc = self.networks.vpc
        if vpc is None or vpc.cloud_router is None or not vpc.cloud_router.name:
            return None
        return vpc.cloud_router.name


@dataclass
class Infrastructure:
    """The infrastructure request being reconciled."""
    name: str
    namespace: str
    region: str


@dataclass
class ServiceAccount:
    """GCP service account used to talk to the project."""
    project_id: str
    email: str = ""
    raw: str = ""

    @classmethod
    def from_json(cls, data: str | bytes) -> "ServiceAccount":
        """Build from the service account key JSON document."""
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        parsed: dict[str, Any] = json.loads(data)
        project_id = parsed.get("project_id")
        if not project_id:
            raise ValueError("Service account JSON has no project_id")
        return cls(
            project_id=project_id,
            email=parsed.get("client_email", ""),
            raw=data,
        )

    @classmethod
    def from_secret_data(cls, data: dict[str, bytes]) -> "ServiceAccount":
        """Build from secret data holding the key under `serviceaccount.json`."""
        if SERVICE_ACCOUNT_SECRET_KEY not in data:
            raise ValueError(f"Secret data has no key {SERVICE_ACCOUNT_SECRET_KEY!r}")
        return cls.from_json(data[SERVICE_ACCOUNT_SECRET_KEY])


@dataclass
class Cluster:
    """Networking facts of the cluster owning the infrastructure."""
    name: str = ""
    pods: Optional[str] = None
    services: Optional[str] = None


def get_pod_network(cluster: Cluster) -> str:
    """Pod CIDR of the cluster, or empty string if unset."""
    return cluster.pods or ""


def get_service_network(cluster: Cluster) -> str:
    """Service CIDR of the cluster, or empty string if unset."""
    return cluster.services or ""
