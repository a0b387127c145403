"""Adapter layer package for BPJS integration boundaries."""

from .interfaces import UpstreamClientPort, UpstreamFetchResult
from .signature import adapter_build_signed_request, adapter_current_timestamp, adapter_sign
from .upstream_client import BpjsUpstreamClient

__all__ = [
    "BpjsUpstreamClient",
    "UpstreamClientPort",
    "UpstreamFetchResult",
    "adapter_build_signed_request",
    "adapter_current_timestamp",
    "adapter_sign",
]
