"""Manifest deployer — prepare, annotate and submit Kubernetes manifests."""

__version__ = "0.1.0"
