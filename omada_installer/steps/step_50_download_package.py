from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..errors import TransferError
from ..lib.artifact import download, plan_artifact
from ..logging_utils import ACTION

logger = logging.getLogger(__name__)


class DownloadPackageStep:
    step_id = "50_download_package"

    def run(self, ctx: ProvisionContext) -> None:
        cfg = ctx.config
        logger.info("Downloading the Omada Software Controller package (ZIP)", extra=ACTION)

        # Registered before the transfer so a partial file is still cleaned up.
        artifact = plan_artifact(cfg.package_url, scratch_dir=cfg.scratch_dir, extract_dir=cfg.extract_dir)
        ctx.artifact = artifact

        r = download(artifact)
        if not r.ok:
            raise TransferError(f"Failed to download Omada Controller ZIP package from {artifact.url}.")
