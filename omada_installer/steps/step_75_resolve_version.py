from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..lib.artifact import parse_version

logger = logging.getLogger(__name__)


class ResolveVersionStep:
    step_id = "75_resolve_version"

    def run(self, ctx: ProvisionContext) -> None:
        artifact = ctx.require_artifact()
        artifact.version = parse_version(ctx.require_installer().name)
        logger.debug("Installer version: %s", artifact.version)
