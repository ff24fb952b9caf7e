"""Tests for chart rendering."""
import logging
import re

import pytest
from gcp_infrastructure.config import (
    CloudRouter,
    Cluster,
    FlowLogs,
    Infrastructure,
    InfrastructureConfig,
    Networks,
    ServiceAccount,
    VPC,
)
from gcp_infrastructure.terraform import (
    ChartRenderer,
    JinjaChartRenderer,
    RenderError,
    RenderResult,
    TerraformFiles,
    render_terraformer_chart,
    select_output_keys,
)
from gcp_infrastructure.terraform.renderer import CHART_NAME, INTERNAL_CHARTS_PATH

INFRA = Infrastructure(name="infra", namespace="shoot--foo--bar", region="europe-west1")
ACCOUNT = ServiceAccount(project_id="my-project")
CLUSTER = Cluster(pods="100.96.0.0/11", services="100.64.0.0/13")

OUTPUT_RE = re.compile(r'^output "([^"]+)"', re.MULTILINE)


class RecordingRenderer(ChartRenderer):
    """Renderer returning fixed files and recording its call."""

    def __init__(self, files=None, error=None):
        self.files = files or {}
        self.error = error
        self.calls = []

    def render(self, chart_path, release_name, namespace, values):
        self.calls.append((chart_path, release_name, namespace, values))
        if self.error:
            raise self.error
        return RenderResult(self.files)


def render(networks: Networks) -> TerraformFiles:
    return render_terraformer_chart(
        JinjaChartRenderer(), INFRA, ACCOUNT, InfrastructureConfig(networks=networks), CLUSTER
    )


class TestRenderResult:
    """Tests for RenderResult."""

    def test_missing_file_is_empty(self):
        """Files the chart does not produce are empty."""
        result = RenderResult({"main.tf": "x"})
        assert result.file_content("main.tf") == "x"
        assert result.file_content("other.tf") == ""
        assert result.file_names == ["main.tf"]


class TestRenderTerraformerChart:
    """Tests for render_terraformer_chart with a fake renderer."""

    def test_calls_renderer_with_chart(self):
        """Renders the gcp-infra chart in the infrastructure namespace."""
        renderer = RecordingRenderer({
            "main.tf": "main",
            "variables.tf": "vars",
            "terraform.tfvars": "tfvars",
        })

        files = render_terraformer_chart(
            renderer, INFRA, ACCOUNT, InfrastructureConfig(), CLUSTER
        )

        assert files == TerraformFiles(main="main", variables="vars", tfvars=b"tfvars")
        chart_path, release_name, namespace, values = renderer.calls[0]
        assert chart_path == INTERNAL_CHARTS_PATH / CHART_NAME
        assert release_name == "gcp-infra"
        assert namespace == "shoot--foo--bar"
        assert values["clusterName"] == "shoot--foo--bar"

    def test_render_error_propagates(self):
        """RenderError from the renderer is raised unchanged."""
        error = RenderError("boom", "chart")
        renderer = RecordingRenderer(error=error)

        with pytest.raises(RenderError) as exc:
            render_terraformer_chart(renderer, INFRA, ACCOUNT, InfrastructureConfig(), CLUSTER)

        assert exc.value is error

    def test_render_is_timed(self, caplog):
        """Render round trips are logged to the perf logger."""
        caplog.set_level(logging.INFO, logger="gcp_infrastructure.perf")
        renderer = RecordingRenderer({"main.tf": "main"})

        render_terraformer_chart(renderer, INFRA, ACCOUNT, InfrastructureConfig(), CLUSTER)

        assert any("render_chart" in r.getMessage() and "OK" in r.getMessage()
                   for r in caplog.records)


class TestJinjaChartRenderer:
    """Tests for the bundled gcp-infra chart."""

    def test_default_network(self):
        """No VPC: network, router and NAT are created."""
        files = render(Networks(workers="10.250.0.0/16"))

        assert 'resource "google_compute_network" "network"' in files.main
        assert 'resource "google_compute_router" "router"' in files.main
        assert 'resource "google_compute_router_nat" "nat"' in files.main
        assert 'network       = "${google_compute_network.network.name}"' in files.main
        assert 'ip_cidr_range = "10.250.0.0/16"' in files.main
        assert "min_ports_per_vm                   = 2048" in files.main
        assert 'project     = "my-project"' in files.main
        assert "log_config {\n    aggregation_interval" not in files.main

    def test_existing_vpc_with_router(self):
        """Existing VPC with router: only the NAT is created on that router."""
        files = render(Networks(
            vpc=VPC(name="my-vpc", cloud_router=CloudRouter(name="r1")),
        ))

        assert 'resource "google_compute_network"' not in files.main
        assert 'resource "google_compute_router" "router"' not in files.main
        assert 'router                             = "r1"' in files.main
        assert 'network       = "my-vpc"' in files.main

    def test_existing_vpc_without_router(self):
        """Existing VPC without router: neither router nor NAT."""
        files = render(Networks(vpc=VPC(name="my-vpc")))

        assert "google_compute_router" not in files.main

    def test_internal_subnet(self):
        files = render(Networks(internal="10.251.0.0/16"))

        assert 'resource "google_compute_subnetwork" "subnetwork-internal"' in files.main
        assert 'ip_cidr_range = "10.251.0.0/16"' in files.main

    def test_flow_logs_single_leaf(self):
        """Only the set flow log leaves are rendered."""
        files = render(Networks(flow_logs=FlowLogs(flow_sampling=0.5)))

        assert "flow_sampling        = 0.5" in files.main
        assert "aggregation_interval" not in files.main
        assert "metadata             =" not in files.main

    def test_flow_logs_empty_block(self):
        """An empty flowLogs block renders no log_config."""
        files = render(Networks(vpc=VPC(name="my-vpc"), flow_logs=FlowLogs()))

        assert "log_config" not in files.main

    def test_cluster_networks_in_firewall(self):
        files = render(Networks())

        assert '"10.0.0.0/8", "100.96.0.0/11", "100.64.0.0/13"' in files.main

    def test_variables_and_tfvars(self):
        files = render(Networks())

        assert 'variable "SERVICEACCOUNT"' in files.variables
        assert files.tfvars.startswith(b"# New line is needed!")

    @pytest.mark.parametrize(
        "networks",
        [
            Networks(),
            Networks(internal="10.251.0.0/16"),
            Networks(vpc=VPC(name="my-vpc")),
            Networks(vpc=VPC(name="my-vpc"), internal="10.251.0.0/16"),
            Networks(vpc=VPC(name="my-vpc", cloud_router=CloudRouter(name="r1"))),
            Networks(vpc=VPC(name="my-vpc", cloud_router=CloudRouter(name=""))),
        ],
    )
    def test_exported_outputs_match_selected_keys(self, networks):
        """The chart exports exactly the outputs the extractor requests."""
        files = render(networks)

        exported = set(OUTPUT_RE.findall(files.main))
        requested = set(select_output_keys(InfrastructureConfig(networks=networks)))
        assert exported == requested

    def test_missing_chart_raises(self, tmp_path):
        with pytest.raises(RenderError) as exc:
            JinjaChartRenderer().render(tmp_path / "nope", "r", "ns", {})

        assert "templates" in str(exc.value)

    def test_undefined_value_raises(self, tmp_path):
        """Templates referencing missing values fail with RenderError."""
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "main.tf").write_text('x = "{{ values.missing }}"\n')

        with pytest.raises(RenderError) as exc:
            JinjaChartRenderer().render(tmp_path, "r", "ns", {})

        assert "main.tf" in str(exc.value)

    def test_release_in_context(self, tmp_path):
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "main.tf").write_text("{{ release.name }}/{{ release.namespace }}\n")

        result = JinjaChartRenderer().render(tmp_path, "gcp-infra", "ns", {})

        assert result.file_content("main.tf") == "gcp-infra/ns\n"
