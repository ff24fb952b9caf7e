"""Extraction of the Terraform state of an infrastructure.

Reads the output variables the applied chart exported for a configuration
into a TerraformState.
"""
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from ..config.schema import InfrastructureConfig
from ..utils.logging_config import timed_section_sync
from .outputs import (
    OUTPUT_KEY_CLOUD_NAT,
    OUTPUT_KEY_CLOUD_ROUTER,
    OUTPUT_KEY_SERVICE_ACCOUNT_EMAIL,
    OUTPUT_KEY_SUBNET_INTERNAL,
    OUTPUT_KEY_SUBNET_NODES,
    OUTPUT_KEY_VPC_NAME,
    has_cloud_router,
    has_internal_subnet,
    select_output_keys,
)
from .schema import TerraformState

logger = logging.getLogger(__name__)


class StateReadError(Exception):
    """Reading Terraform output variables failed."""

    def __init__(self, message: str, missing: Optional[list[str]] = None):
        self.message = message
        self.missing = missing or []
        super().__init__(message)


class StateAccessor(ABC):
    """Gives access to the output variables of an applied Terraform config."""

    @abstractmethod
    def get_output_variables(self, *names: str) -> dict[str, str]:
        """Return the values of all requested output variables.

        Raises:
            StateReadError: If any variable is missing or the state is unreadable
        """


class OutputValue(BaseModel):
    """A Terraform output as stored in the state."""

    value: Any
    type: Any = None
    sensitive: bool = False


class StateDocument(BaseModel):
    """The parts of a Terraform state document holding outputs."""

    version: int = 4
    terraform_version: str = ""
    outputs: dict[str, OutputValue] = {}


class TerraformStateOutputs(StateAccessor):
    """StateAccessor over a Terraform state JSON document."""

    def __init__(self, document: StateDocument):
        self.document = document

    @classmethod
    def from_json(cls, data: str | bytes) -> "TerraformStateOutputs":
        if not data or not data.strip():
            raise StateReadError("Terraform state is empty")
        try:
            return cls(StateDocument.model_validate_json(data))
        except ValidationError as e:
            raise StateReadError(f"Invalid Terraform state: {e}") from e

    @classmethod
    def from_path(cls, path: str | Path) -> "TerraformStateOutputs":
        try:
            data = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StateReadError(f"Could not read Terraform state {path}: {e}") from e
        return cls.from_json(data)

    def get_output_variables(self, *names: str) -> dict[str, str]:
        outputs = self.document.outputs
        missing = [name for name in names if name not in outputs]
        if missing:
            raise StateReadError(
                f"Could not find all requested outputs: {', '.join(missing)}",
                missing=missing,
            )
        return {name: _output_string(outputs[name].value) for name in names}


def _output_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def extract_terraform_state(
    accessor: StateAccessor,
    config: InfrastructureConfig,
) -> TerraformState:
    """
    Extract the TerraformState for the given configuration.

    Only the outputs the chart exports for this configuration are requested,
    in a single call.

    Raises:
        StateReadError: Propagated from the accessor
    """
    keys = select_output_keys(config)
    logger.info(f"Requesting {len(keys)} Terraform outputs: {', '.join(keys)}")

    with timed_section_sync("read_state", keys=len(keys)):
        variables = accessor.get_output_variables(*keys)

    missing = [key for key in keys if key not in variables]
    if missing:
        raise StateReadError(
            f"State accessor did not return outputs: {', '.join(missing)}",
            missing=missing,
        )

    cloud_router_name = ""
    cloud_nat_name = ""
    if has_cloud_router(config):
        cloud_router_name = variables[OUTPUT_KEY_CLOUD_ROUTER]
        cloud_nat_name = variables[OUTPUT_KEY_CLOUD_NAT]

    subnet_internal = None
    if has_internal_subnet(config):
        subnet_internal = variables[OUTPUT_KEY_SUBNET_INTERNAL]

    return TerraformState(
        vpc_name=variables[OUTPUT_KEY_VPC_NAME],
        service_account_email=variables[OUTPUT_KEY_SERVICE_ACCOUNT_EMAIL],
        subnet_nodes=variables[OUTPUT_KEY_SUBNET_NODES],
        cloud_router_name=cloud_router_name,
        cloud_nat_name=cloud_nat_name,
        subnet_internal=subnet_internal,
    )
