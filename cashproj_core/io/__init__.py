from cashproj_core.io.events import load_events  # noqa: F401
from cashproj_core.io.config import (  # noqa: F401
    build_projection_config,
    load_projection_config,
)

__all__ = ["load_events", "build_projection_config", "load_projection_config"]
