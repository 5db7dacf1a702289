import logging
from pathlib import Path

import pytest

from omada_installer.context import PackageArtifact
from omada_installer.main import build_steps
from omada_installer.pipeline import run_pipeline

DEP_PACKAGES = ["mongodb-org", "openjdk-21-jre-headless", "jsvc"]


def _installs(host, package):
    return host.ran("apt-get", "-qq", "install", "-y", package)


def _assert_no_artifacts(ctx):
    cfg = ctx.config
    assert not Path(cfg.extract_dir).exists()
    assert not list(Path(cfg.scratch_dir).glob("*.zip"))


def test_full_install_succeeds(provisionable, ctx, caplog):
    caplog.set_level(logging.INFO)
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.ok
    assert result.exit_code == 0
    assert result.ran_steps[-1] == "95_report"
    assert len(result.ran_steps) == 13

    assert ctx.host.codename == "jammy"
    assert ctx.host.distribution == "Ubuntu 22.04.3 LTS"
    assert "avx" in ctx.host.cpu_flags
    assert ctx.artifact.version == "v5.15.24.14"

    sources = Path(ctx.config.sources_list_path).read_text(encoding="utf-8")
    assert " jammy/mongodb-org/8.0 multiverse" in sources
    assert f"signed-by={ctx.config.keyring_path}" in sources
    assert Path(ctx.config.keyring_path).exists()

    assert provisionable.ran("dpkg", "-i") == 1
    assert provisionable.ran("apt-get", "-f") == 0
    for pkg in DEP_PACKAGES:
        assert _installs(provisionable, pkg) == 1

    _assert_no_artifacts(ctx)
    assert "https://192.0.2.10:8043" in caplog.text


def test_dependencies_install_in_order(provisionable, ctx):
    run_pipeline(ctx=ctx, steps=build_steps())

    installed = [c[4] for c in provisionable.calls if c[:4] == ["apt-get", "-qq", "install", "-y"] and len(c) == 5]
    assert installed == DEP_PACKAGES
    # Dependencies go in before the controller package.
    dpkg_at = next(i for i, c in enumerate(provisionable.calls) if c[:2] == ["dpkg", "-i"])
    jsvc_at = next(i for i, c in enumerate(provisionable.calls) if c[-1] == "jsvc")
    assert jsvc_at < dpkg_at


def test_not_root_stops_before_anything_else(fake_host, cpuinfo, ctx, monkeypatch):
    from omada_installer.lib import hostinfo

    monkeypatch.setattr(hostinfo.os, "geteuid", lambda: 1000)
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert not result.ok
    assert result.exit_code == 1
    assert result.failed_step == "10_check_privileges"
    assert result.ran_steps == []
    assert fake_host.calls == []
    assert not Path(ctx.config.sources_list_path).exists()


def test_cpu_without_avx_is_rejected(fake_host, as_root, cpuinfo, ctx):
    cpuinfo.write_text("flags\t\t: fpu sse sse2\n", encoding="utf-8")
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.failed_step == "15_check_cpu"
    assert "AVX" in result.error


@pytest.mark.parametrize(
    "description",
    ["Ubuntu 23.10", "Debian GNU/Linux 12 (bookworm)", "Ubuntu 18.04.6 LTS", "Linux Mint 21.2"],
)
def test_unsupported_os_exits_before_mutation(provisionable, ctx, description):
    provisionable.os_description = description
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert not result.ok
    assert result.failed_step == "20_detect_os"
    commands = {c[0] for c in provisionable.calls}
    assert commands == {"hostnamectl"}
    assert not Path(ctx.config.sources_list_path).exists()


@pytest.mark.parametrize(
    "description,codename",
    [("Ubuntu 20.04.6 LTS", "focal"), ("Ubuntu 22.04.3 LTS", "jammy"), ("Ubuntu 24.04 LTS", "noble")],
)
def test_supported_os_resolves_codename(provisionable, ctx, description, codename):
    provisionable.os_description = description
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.ok
    assert f" {codename}/mongodb-org/" in Path(ctx.config.sources_list_path).read_text(encoding="utf-8")


def test_prerequisites_retry_with_visible_output(provisionable, ctx):
    provisionable.fail("apt-get", "-qq", "install", "-y", "gnupg")
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.ok
    assert provisionable.ran("apt-get", "install", "-y", "gnupg", "curl", "unzip") == 1


def test_prerequisites_fail_twice_is_fatal(provisionable, ctx):
    provisionable.fail("apt-get", "-qq", "install", "-y", "gnupg")
    provisionable.fail("apt-get", "install", "-y", "gnupg")
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.failed_step == "30_install_prerequisites"
    assert provisionable.ran("curl") == 0


def test_index_refresh_failure_is_fatal(provisionable, ctx):
    # First refresh belongs to the prerequisites step and only warns.
    provisionable.fail("apt-get", "-qq", "update", times=2)
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.failed_step == "40_register_repository"
    assert "package index" in result.error
    assert provisionable.ran("curl", "-#") == 0


def test_key_download_failure_is_fatal(provisionable, ctx):
    provisionable.fail("curl", "-fsSL")
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.failed_step == "40_register_repository"
    assert provisionable.ran("gpg") == 0
    assert not Path(ctx.config.sources_list_path).exists()


def test_download_failure_removes_partial_archive(provisionable, ctx):
    provisionable.fail("curl", "-#")
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.failed_step == "50_download_package"
    assert not ctx.artifact.archive_path.exists()
    assert provisionable.ran("unzip") == 0


def test_extraction_failure_removes_archive_and_dir(provisionable, ctx):
    provisionable.fail("unzip")
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.failed_step == "55_extract_package"
    assert result.exit_code == 1
    assert not ctx.artifact.archive_path.exists()
    assert not ctx.artifact.extract_dir.exists()
    assert _installs(provisionable, "mongodb-org") == 0


def test_no_installer_lists_directory_and_stops(provisionable, ctx, caplog):
    caplog.set_level(logging.INFO)
    provisionable.extracted_files = ["README.txt", "docs/guide.pdf"]
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.failed_step == "60_locate_installer"
    assert "README.txt" in caplog.text
    assert "docs/guide.pdf" in caplog.text
    assert provisionable.ran("dpkg") == 0
    for pkg in DEP_PACKAGES:
        assert _installs(provisionable, pkg) == 0
    _assert_no_artifacts(ctx)


def test_nested_installer_is_not_picked_up(provisionable, ctx):
    provisionable.extracted_files = ["nested/omada_v5.15.24.14_linux_x64.deb"]
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.failed_step == "60_locate_installer"


def test_multiple_installers_are_rejected(provisionable, ctx):
    provisionable.extracted_files = ["omada_v5.15.24.14_linux_x64.deb", "omada_v5.14.1_linux_x64.deb"]
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.failed_step == "60_locate_installer"
    assert "expected exactly one" in result.error
    assert provisionable.ran("dpkg") == 0


def test_dependency_failure_is_fatal_without_retry(provisionable, ctx):
    provisionable.fail("apt-get", "-qq", "install", "-y", "openjdk-21-jre-headless")
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.failed_step == "70_install_dependencies"
    assert "OpenJDK" in result.error
    assert _installs(provisionable, "openjdk-21-jre-headless") == 1
    assert _installs(provisionable, "jsvc") == 0
    _assert_no_artifacts(ctx)


def test_primary_install_repaired_then_retried(provisionable, ctx):
    provisionable.fail("dpkg", "-i")
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.ok
    assert provisionable.ran("apt-get", "-f", "-y", "install") == 1
    assert provisionable.ran("dpkg", "-i") == 2
    _assert_no_artifacts(ctx)


def test_primary_install_retry_happens_exactly_once(provisionable, ctx):
    provisionable.fail("dpkg", "-i", times=2)
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert not result.ok
    assert result.exit_code == 1
    assert result.failed_step == "80_install_controller"
    assert provisionable.ran("apt-get", "-f", "-y", "install") == 1
    assert provisionable.ran("dpkg", "-i") == 2
    _assert_no_artifacts(ctx)


def test_failed_repair_skips_retry(provisionable, ctx):
    provisionable.fail("dpkg", "-i")
    provisionable.fail("apt-get", "-f", "-y", "install")
    result = run_pipeline(ctx=ctx, steps=build_steps())

    assert result.failed_step == "80_install_controller"
    assert "apt-get -f install" in result.error
    assert provisionable.ran("dpkg", "-i") == 1
    _assert_no_artifacts(ctx)


def test_interrupt_still_cleans_up(ctx, tmp_path):
    archive = tmp_path / "pkg.zip"
    extract_dir = tmp_path / "extracted"

    class MakeArtifact:
        step_id = "make"

        def run(self, c):
            archive.write_bytes(b"PK")
            (extract_dir / "sub").mkdir(parents=True)
            c.artifact = PackageArtifact(url="https://example.invalid/pkg.zip", archive_path=archive, extract_dir=extract_dir)

    class Interrupt:
        step_id = "interrupt"

        def run(self, c):
            raise KeyboardInterrupt

    with pytest.raises(KeyboardInterrupt):
        run_pipeline(ctx=ctx, steps=[MakeArtifact(), Interrupt()])

    assert not archive.exists()
    assert not extract_dir.exists()
    assert ctx.current_step is None
