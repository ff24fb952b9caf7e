"""InfrastructureStatus computation from Terraform state."""
from ..config.schema import InfrastructureConfig
from .schema import (
    CloudRouterStatus,
    InfrastructureStatus,
    NetworkStatus,
    Subnet,
    SubnetPurpose,
    TerraformState,
    VPCStatus,
)
from .state import StateAccessor, extract_terraform_state


def status_from_terraform_state(state: TerraformState) -> InfrastructureStatus:
    """Compute an InfrastructureStatus from the given Terraform state."""
    vpc = VPCStatus(name=state.vpc_name)
    if state.cloud_router_name:
        vpc.cloud_router = CloudRouterStatus(name=state.cloud_router_name)

    subnets = [Subnet(purpose=SubnetPurpose.NODES, name=state.subnet_nodes)]
    if state.subnet_internal is not None:
        subnets.append(Subnet(purpose=SubnetPurpose.INTERNAL, name=state.subnet_internal))

    return InfrastructureStatus(
        networks=NetworkStatus(vpc=vpc, subnets=subnets),
        service_account_email=state.service_account_email,
    )


def compute_status(
    accessor: StateAccessor,
    config: InfrastructureConfig,
) -> InfrastructureStatus:
    """Compute the status from the Terraform state for the given configuration."""
    state = extract_terraform_state(accessor, config)
    return status_from_terraform_state(state)
