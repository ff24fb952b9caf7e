"""Value tree builder for the gcp-infra Terraform chart."""
import logging
from typing import Any

from ..config.schema import (
    Cluster,
    FlowLogs,
    Infrastructure,
    InfrastructureConfig,
    ServiceAccount,
    get_pod_network,
    get_service_network,
)
from .outputs import OUTPUT_KEYS

logger = logging.getLogger(__name__)

# Terraform reference to the network created by the chart
DEFAULT_VPC_NAME = "${google_compute_network.network.name}"

DEFAULT_MIN_PORTS_PER_VM = 2048

# FlowLogs attribute -> chart value name
FLOW_LOG_FIELDS = (
    ("aggregation_interval", "aggregationInterval"),
    ("flow_sampling", "flowSampling"),
    ("metadata", "metadata"),
)


def compute_chart_values(
    infra: Infrastructure,
    account: ServiceAccount,
    config: InfrastructureConfig,
    cluster: Cluster,
) -> dict[str, Any]:
    """
    Compute the values for the gcp-infra chart.

    Args:
        infra: Infrastructure request (namespace, region)
        account: Service account of the target project
        config: Provider infrastructure configuration
        cluster: Cluster owning the infrastructure

    Returns:
        Nested value tree for the chart templates
    """
    networks = config.networks

    vpc_name = DEFAULT_VPC_NAME
    create_vpc = True
    create_cloud_router = True
    if networks.vpc is not None:
        vpc_name = networks.vpc.name
        create_vpc = False
        create_cloud_router = False

    vpc: dict[str, Any] = {"name": vpc_name}
    cloud_router_name = config.existing_cloud_router_name()
    if cloud_router_name is not None:
        vpc["cloudRouter"] = {"name": cloud_router_name}

    min_ports_per_vm = DEFAULT_MIN_PORTS_PER_VM
    if networks.cloud_nat is not None and networks.cloud_nat.min_ports_per_vm is not None:
        min_ports_per_vm = networks.cloud_nat.min_ports_per_vm

    values: dict[str, Any] = {
        "google": {
            "region": infra.region,
            "project": account.project_id,
        },
        "create": {
            "vpc": create_vpc,
            "cloudRouter": create_cloud_router,
        },
        "vpc": vpc,
        "clusterName": infra.namespace,
        "networks": {
            "pods": get_pod_network(cluster),
            "services": get_service_network(cluster),
            "workers": networks.workers_cidr,
            "internal": networks.internal,
            "cloudNAT": {
                "minPortsPerVM": min_ports_per_vm,
            },
        },
        "outputKeys": dict(OUTPUT_KEYS),
    }

    if networks.flow_logs is not None:
        values["networks"]["flowLogs"] = _flow_log_values(networks.flow_logs)

    logger.debug(
        f"Computed chart values for {infra.namespace}: "
        f"create_vpc={create_vpc}, create_cloud_router={create_cloud_router}, "
        f"vpc={vpc_name}"
    )
    return values


def _flow_log_values(flow_logs: FlowLogs) -> dict[str, Any]:
    """Only the flow log leaves that are set."""
    values = {}
    for attr, key in FLOW_LOG_FIELDS:
        value = getattr(flow_logs, attr)
        if value is not None:
            values[key] = value
    return values
