"""Terraform output variables shared by the chart values and state extraction.

The chart exports its outputs under the names in OUTPUT_KEYS, and the
extractor requests exactly the subset select_output_keys() returns for the
same configuration.
"""
import logging

from ..config.schema import InfrastructureConfig

logger = logging.getLogger(__name__)

# Purpose of the Terraformer instance managing the infrastructure
TERRAFORMER_PURPOSE = "infra"

OUTPUT_KEY_VPC_NAME = "vpc_name"
OUTPUT_KEY_SERVICE_ACCOUNT_EMAIL = "service_account_email"
OUTPUT_KEY_SUBNET_NODES = "subnet_nodes"
OUTPUT_KEY_SUBNET_INTERNAL = "subnet_internal"
OUTPUT_KEY_CLOUD_NAT = "cloud_nat"
OUTPUT_KEY_CLOUD_ROUTER = "cloud_router"

# Chart value name -> Terraform output variable
OUTPUT_KEYS = {
    "vpcName": OUTPUT_KEY_VPC_NAME,
    "cloudNAT": OUTPUT_KEY_CLOUD_NAT,
    "cloudRouter": OUTPUT_KEY_CLOUD_ROUTER,
    "serviceAccountEmail": OUTPUT_KEY_SERVICE_ACCOUNT_EMAIL,
    "subnetNodes": OUTPUT_KEY_SUBNET_NODES,
    "subnetInternal": OUTPUT_KEY_SUBNET_INTERNAL,
}


def vpc_specified_without_cloud_router(config: InfrastructureConfig) -> bool:
    """Whether an existing VPC is used without naming its cloud router.

    In that case no cloud router or Cloud NAT is created or referenced, so the
    chart exports neither output.
    """
    return (
        config.networks.vpc is not None
        and config.existing_cloud_router_name() is None
    )


def has_cloud_router(config: InfrastructureConfig) -> bool:
    """Whether the chart creates or references a cloud router and Cloud NAT."""
    return not vpc_specified_without_cloud_router(config)


def has_internal_subnet(config: InfrastructureConfig) -> bool:
    return config.networks.internal is not None


def select_output_keys(config: InfrastructureConfig) -> list[str]:
    """Output variables the applied chart exports for this configuration."""
    keys = [
        OUTPUT_KEY_VPC_NAME,
        OUTPUT_KEY_SUBNET_NODES,
        OUTPUT_KEY_SERVICE_ACCOUNT_EMAIL,
    ]

    if has_cloud_router(config):
        keys.extend([OUTPUT_KEY_CLOUD_ROUTER, OUTPUT_KEY_CLOUD_NAT])

    if has_internal_subnet(config):
        keys.append(OUTPUT_KEY_SUBNET_INTERNAL)

    logger.debug(f"Selected output keys: {', '.join(keys)}")
    return keys
