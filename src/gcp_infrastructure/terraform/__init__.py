"""Terraformer bridge - chart values forward, InfrastructureStatus back.

Usage:
    from gcp_infrastructure.terraform import (
        JinjaChartRenderer,
        TerraformStateOutputs,
        compute_status,
        render_terraformer_chart,
    )

    files = render_terraformer_chart(JinjaChartRenderer(), infra, account, config, cluster)
    # ... terraform apply ...
    status = compute_status(TerraformStateOutputs.from_path("terraform.tfstate"), config)
"""

from .schema import (
    STATUS_API_VERSION,
    STATUS_KIND,
    CloudRouterStatus,
    InfrastructureStatus,
    NetworkStatus,
    Subnet,
    SubnetPurpose,
    TerraformFiles,
    TerraformState,
    VPCStatus,
)
from .outputs import (
    OUTPUT_KEYS,
    TERRAFORMER_PURPOSE,
    select_output_keys,
    vpc_specified_without_cloud_router,
)
from .values import DEFAULT_MIN_PORTS_PER_VM, DEFAULT_VPC_NAME, compute_chart_values
from .renderer import (
    ChartRenderer,
    JinjaChartRenderer,
    RenderError,
    RenderResult,
    render_terraformer_chart,
)
from .state import (
    StateAccessor,
    StateReadError,
    TerraformStateOutputs,
    extract_terraform_state,
)
from .status import compute_status, status_from_terraform_state

__all__ = [
    # Schema classes
    "STATUS_API_VERSION",
    "STATUS_KIND",
    "CloudRouterStatus",
    "InfrastructureStatus",
    "NetworkStatus",
    "Subnet",
    "SubnetPurpose",
    "TerraformFiles",
    "TerraformState",
    "VPCStatus",
    # Output keys
    "OUTPUT_KEYS",
    "TERRAFORMER_PURPOSE",
    "select_output_keys",
    "vpc_specified_without_cloud_router",
    # Forward
    "DEFAULT_MIN_PORTS_PER_VM",
    "DEFAULT_VPC_NAME",
    "compute_chart_values",
    "ChartRenderer",
    "JinjaChartRenderer",
    "RenderError",
    "RenderResult",
    "render_terraformer_chart",
    # Reverse
    "StateAccessor",
    "StateReadError",
    "TerraformStateOutputs",
    "extract_terraform_state",
    "compute_status",
    "status_from_terraform_state",
]
