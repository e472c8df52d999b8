"""safeconfig pipeline package.

This package contains the stage orchestration and the telemetry hooks that
wrap each stage.
"""

from .orchestrator import ConfigPipeline, load_config

__all__ = ["ConfigPipeline", "load_config"]
