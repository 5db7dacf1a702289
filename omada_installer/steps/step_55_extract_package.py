from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..errors import ArchiveError
from ..lib.artifact import extract, remove_artifact
from ..logging_utils import ACTION

logger = logging.getLogger(__name__)


class ExtractPackageStep:
    step_id = "55_extract_package"

    def run(self, ctx: ProvisionContext) -> None:
        artifact = ctx.require_artifact()
        logger.info("Extracting the Omada Software Controller .deb file", extra=ACTION)

        r = extract(artifact)
        if not r.ok:
            remove_artifact(artifact)
            raise ArchiveError(f"Failed to unzip Omada Controller package: {r.diagnostic}")
