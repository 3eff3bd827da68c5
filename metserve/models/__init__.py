"""Models package - re-exports the metric DTOs and enums."""

from metserve.models.enums import *  # noqa: F401,F403
from metserve.models.metrics import *  # noqa: F401,F403
