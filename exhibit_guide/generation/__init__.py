"""Content generation: the per-request orchestrator and the catalog backfill job."""

from .backfill import run_backfill  # noqa: F401
from .orchestrator import ContentGenerator, ItemNotFoundError  # noqa: F401
