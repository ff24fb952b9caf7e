"""Parser for GCP infrastructure provider configs.

Converts dict/YAML input using the wire (camelCase) keys to the
InfrastructureConfig dataclasses. Only the document structure is checked;
semantic validation happens upstream.
"""
from pathlib import Path
from typing import Any, Optional

import yaml

from .schema import (
    CloudNAT,
    CloudRouter,
    FlowLogs,
    InfrastructureConfig,
    Networks,
    VPC,
)


class ParseError(Exception):
    """Error parsing an infrastructure configuration."""
    pass


class ConfigParser:
    """Parse InfrastructureConfig from dict/YAML format."""

    def parse(self, config: dict[str, Any]) -> InfrastructureConfig:
        """
        Parse a provider config dict into an InfrastructureConfig.

        Args:
            config: Dict with apiVersion, kind and networks

        Returns:
            InfrastructureConfig object

        Raises:
            ParseError: If the document is not shaped like a provider config
        """
        if not isinstance(config, dict):
            raise ParseError(f"Expected a mapping, got {type(config).__name__}")

        defaults = InfrastructureConfig()
        return InfrastructureConfig(
            networks=self._parse_networks(self._mapping(config, "networks") or {}),
            api_version=config.get("apiVersion", defaults.api_version),
            kind=config.get("kind", defaults.kind),
        )

    def parse_yaml(self, text: str) -> InfrastructureConfig:
        """Parse a YAML document."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ParseError(f"Invalid YAML: {e}") from e
        return self.parse(data or {})

    def load(self, path: str | Path) -> InfrastructureConfig:
        """Load and parse a YAML file."""
        with open(path) as f:
            return self.parse_yaml(f.read())

    def _parse_networks(self, config: dict[str, Any]) -> Networks:
        vpc = None
        vpc_config = self._mapping(config, "vpc")
        if vpc_config is not None:
            router = None
            router_config = self._mapping(vpc_config, "cloudRouter")
            if router_config is not None:
                router = CloudRouter(name=router_config.get("name", ""))
            vpc = VPC(name=vpc_config.get("name", ""), cloud_router=router)

        cloud_nat = None
        nat_config = self._mapping(config, "cloudNAT")
        if nat_config is not None:
            cloud_nat = CloudNAT(
                min_ports_per_vm=self._optional_int(nat_config, "minPortsPerVM")
            )

        flow_logs = None
        flow_config = self._mapping(config, "flowLogs")
        if flow_config is not None:
            flow_logs = FlowLogs(
                aggregation_interval=flow_config.get("aggregationInterval"),
                flow_sampling=self._optional_float(flow_config, "flowSampling"),
                metadata=flow_config.get("metadata"),
            )

        return Networks(
            vpc=vpc,
            cloud_nat=cloud_nat,
            worker=config.get("worker") or "",
            workers=config.get("workers") or "",
            internal=config.get("internal"),
            flow_logs=flow_logs,
        )

    def _mapping(self, config: dict[str, Any], key: str) -> Optional[dict[str, Any]]:
        """Return a nested block, None if absent."""
        value = config.get(key)
        if value is None:
            return None
        if not isinstance(value, dict):
            raise ParseError(f"Field {key} must be a mapping, got {type(value).__name__}")
        return value

    def _optional_int(self, config: dict[str, Any], key: str) -> Optional[int]:
        value = config.get(key)
        if value is None:
            return None
        if isinstance(value, bool):
            raise ParseError(f"Field {key} must be an integer: {value}")
        if isinstance(value, float) and not value.is_integer():
            raise ParseError(f"Field {key} must be a whole number: {value}")
        try:
            return int(value)
        except (ValueError, TypeError):
            raise ParseError(f"Field {key} must be an integer: {value}")

    def _optional_float(self, config: dict[str, Any], key: str) -> Optional[float]:
        value = config.get(key)
        if value is None:
            return None
        if isinstance(value, bool):
            raise ParseError(f"Field {key} must be a number: {value}")
        try:
            return float(value)
        except (ValueError, TypeError):
            raise ParseError(f"Field {key} must be a number: {value}")
