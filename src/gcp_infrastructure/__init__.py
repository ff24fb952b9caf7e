"""GCP infrastructure Terraformer bridge.

Translates a GCP InfrastructureConfig into values for the gcp-infra
Terraform chart, and maps the resulting Terraform outputs back into a
versioned InfrastructureStatus.
"""

__version__ = "0.1.0"
