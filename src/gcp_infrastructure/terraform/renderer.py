"""Chart rendering for the gcp-infra Terraform configuration.

A chart is a directory with a `templates/` folder; rendering it with a value
tree produces named files (main.tf, variables.tf, terraform.tfvars).
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
)

from ..config.schema import Cluster, Infrastructure, InfrastructureConfig, ServiceAccount
from ..utils.logging_config import timed
from .schema import TerraformFiles
from .values import compute_chart_values

logger = logging.getLogger(__name__)

INTERNAL_CHARTS_PATH = Path(__file__).resolve().parent.parent / "charts" / "internal"
CHART_NAME = "gcp-infra"


class RenderError(Exception):
    """Rendering a chart failed."""

    def __init__(self, message: str, chart_path: str = ""):
        self.message = message
        self.chart_path = chart_path
        super().__init__(f"{chart_path}: {message}" if chart_path else message)


class RenderResult:
    """Files produced by rendering a chart."""

    def __init__(self, files: dict[str, str]):
        self._files = dict(files)

    def file_content(self, name: str) -> str:
        """Content of a rendered file, empty if the chart has no such file."""
        return self._files.get(name, "")

    @property
    def file_names(self) -> list[str]:
        return sorted(self._files)


class ChartRenderer(ABC):
    """Renders a chart directory with a value tree."""

    @abstractmethod
    def render(
        self,
        chart_path: str | Path,
        release_name: str,
        namespace: str,
        values: dict[str, Any],
    ) -> RenderResult:
        """Render all templates of the chart.

        Raises:
            RenderError: If a template fails or does not match the values
        """


class JinjaChartRenderer(ChartRenderer):
    """ChartRenderer rendering every file under `<chart>/templates` with Jinja2.

    Templates see `values` and `release` (name, namespace). Undefined values
    are errors.
    """

    def render(
        self,
        chart_path: str | Path,
        release_name: str,
        namespace: str,
        values: dict[str, Any],
    ) -> RenderResult:
        template_dir = Path(chart_path) / "templates"
        if not template_dir.is_dir():
            raise RenderError("chart has no templates directory", str(chart_path))

        env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        release = {"name": release_name, "namespace": namespace}

        files = {}
        for template_name in env.list_templates():
            try:
                template = env.get_template(template_name)
                files[template_name] = template.render(values=values, release=release)
            except TemplateError as e:
                raise RenderError(f"{template_name}: {e}", str(chart_path)) from e

        logger.debug(f"Rendered {len(files)} files from chart {chart_path}")
        return RenderResult(files)


@timed("render_chart")
def render_terraformer_chart(
    renderer: ChartRenderer,
    infra: Infrastructure,
    account: ServiceAccount,
    config: InfrastructureConfig,
    cluster: Cluster,
) -> TerraformFiles:
    """Render the gcp-infra chart for the given infrastructure."""
    values = compute_chart_values(infra, account, config, cluster)

    release = renderer.render(
        INTERNAL_CHARTS_PATH / CHART_NAME,
        CHART_NAME,
        infra.namespace,
        values,
    )

    return TerraformFiles(
        main=release.file_content("main.tf"),
        variables=release.file_content("variables.tf"),
        tfvars=release.file_content("terraform.tfvars").encode("utf-8"),
    )
