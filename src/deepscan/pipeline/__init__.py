"""Scan pipeline: options, variant strategies and the stage executor."""

from deepscan.pipeline.executor import PipelineResult, ScanPipeline, scan_in_progress
from deepscan.pipeline.options import (
    GitProjectOptions,
    PackageOptions,
    ProjectOptions,
    ScanKind,
    ScanOptions,
    options_from_dict,
)
from deepscan.pipeline.variants import get_variant

__all__ = [
    "GitProjectOptions",
    "PackageOptions",
    "PipelineResult",
    "ProjectOptions",
    "ScanKind",
    "ScanOptions",
    "ScanPipeline",
    "get_variant",
    "options_from_dict",
    "scan_in_progress",
]
