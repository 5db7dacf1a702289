from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..pipeline import cleanup_artifacts

logger = logging.getLogger(__name__)


class CleanupStep:
    step_id = "90_cleanup"

    def run(self, ctx: ProvisionContext) -> None:
        cleanup_artifacts(ctx)
