from __future__ import annotations

import logging

from ..context import ProvisionContext
from ..errors import RepositoryError
from ..lib.apt_repo import dearmor_key, fetch_signing_key, write_source_list
from ..lib.pkg import apt_update
from ..logging_utils import ACTION

logger = logging.getLogger(__name__)


class RegisterRepositoryStep:
    step_id = "40_register_repository"

    def run(self, ctx: ProvisionContext) -> None:
        cfg = ctx.config
        host = ctx.require_host()

        logger.info("Importing the MongoDB PGP key and creating the APT repository", extra=ACTION)
        r = fetch_signing_key(cfg.mongodb_key_url)
        if not r.ok or not r.stdout.strip():
            raise RepositoryError(f"Failed to download the MongoDB PGP key from {cfg.mongodb_key_url}: {r.diagnostic}")

        r = dearmor_key(r.stdout, cfg.keyring_path)
        if not r.ok:
            raise RepositoryError(f"Failed to import the MongoDB PGP key into {cfg.keyring_path}: {r.diagnostic}")

        write_source_list(cfg.sources_list_path, cfg.mongodb_source_line(host.codename))

        # Every later install depends on a fresh index.
        r = apt_update()
        if not r.ok:
            raise RepositoryError(f"Failed to refresh the package index: {r.diagnostic}")
