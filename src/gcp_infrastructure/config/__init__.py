"""Infrastructure configuration model and parsing."""
from .schema import (
    CloudNAT,
    CloudRouter,
    Cluster,
    FlowLogs,
    Infrastructure,
    InfrastructureConfig,
    Networks,
    ServiceAccount,
    VPC,
    get_pod_network,
    get_service_network,
)
from .parser import ConfigParser, ParseError

__all__ = [
    "CloudNAT",
    "CloudRouter",
    "Cluster",
    "FlowLogs",
    "Infrastructure",
    "InfrastructureConfig",
    "Networks",
    "ServiceAccount",
    "VPC",
    "get_pod_network",
    "get_service_network",
    "ConfigParser",
    "ParseError",
]
