"""Schema definitions for the Terraformer bridge.

Rendered chart files, the flat Terraform state and the versioned
InfrastructureStatus.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
import json

STATUS_API_VERSION = "gcp.provider.extensions.gardener.cloud/v1alpha1"
STATUS_KIND = "InfrastructureStatus"


class SubnetPurpose(str, Enum):
    """Purpose of a subnet in the status."""
    NODES = "nodes"
    INTERNAL = "internal"


@dataclass(frozen=True)
class TerraformFiles:
    """Files rendered from the infrastructure chart."""
    main: str
    variables: str
    tfvars: bytes


@dataclass(frozen=True)
class TerraformState:
    """Terraform state of an infrastructure."""
    # Name of the VPC created for or reused by the infrastructure
    vpc_name: str
    service_account_email: str
    # Name of the nodes subnet
    subnet_nodes: str
    # Empty unless a cloud router was created or named
    cloud_router_name: str = ""
    cloud_nat_name: str = ""
    # Only set when an internal subnet was requested
    subnet_internal: Optional[str] = None


@dataclass
class CloudRouterStatus:
    name: str


@dataclass
class VPCStatus:
    name: str
    cloud_router: Optional[CloudRouterStatus] = None


@dataclass
class Subnet:
    purpose: SubnetPurpose
    name: str


@dataclass
class NetworkStatus:
    vpc: VPCStatus
    subnets: list[Subnet] = field(default_factory=list)


@dataclass
class InfrastructureStatus:
    """Status of a GCP infrastructure, versioned by api_version/kind."""
    networks: NetworkStatus
    service_account_email: str = ""
    api_version: str = STATUS_API_VERSION
    kind: str = STATUS_KIND

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        vpc: dict[str, Any] = {"name": self.networks.vpc.name}
        if self.networks.vpc.cloud_router is not None:
            vpc["cloudRouter"] = {"name": self.networks.vpc.cloud_router.name}

        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "networks": {
                "vpc": vpc,
                "subnets": [
                    {"purpose": s.purpose.value, "name": s.name}
                    for s in self.networks.subnets
                ],
            },
            "serviceAccountEmail": self.service_account_email,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
