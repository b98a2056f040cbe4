import asyncio
import os
from pathlib import Path, PureWindowsPath

import pytest

from ds_module_service.backends.file_backend import FileBackend
from ds_module_service.errors import ModuleNotFound
from ds_module_service.resolution.module_id import WEB_APPS, WIN_B64

LOCAL = "D:\\Dev\\gitWorkspaces\\WebApps"
BSF = "\\\\ap-bri-san03b\\R422\\BSF"
BSFTST = "\\\\ap-bri-san03b\\R422\\BSFTST"


def webapps(root: str) -> str:
    return str(PureWindowsPath(root, WIN_B64, WEB_APPS))


class FakeProber:
    """Prober over an in-memory set of paths, recording every probe."""

    def __init__(self, existing, contents=None):
        self.existing = set(existing)
        self.contents = contents or {}
        self.probed = []
        self.reads = []

    async def exists(self, path):
        self.probed.append(path)
        return path in self.existing

    async def read_text(self, path, encoding):
        self.reads.append((path, encoding))
        return self.contents.get(path, "random data")


def windows_backend(prober: FakeProber) -> FileBackend:
    return FileBackend(prober=prober, path_type=PureWindowsPath)


def test_configure_roots_resolves_every_prerequisite():
    expected = {LOCAL: webapps(LOCAL), BSF: webapps(BSF), BSFTST: webapps(BSFTST)}
    backend = windows_backend(FakeProber(expected.values()))

    mapping = asyncio.run(backend.configure_roots(list(expected)))

    assert mapping == expected
    assert list(backend.asset_roots) == [LOCAL, BSF, BSFTST]


def test_configure_roots_is_idempotent_and_replaces_mapping():
    backend = windows_backend(FakeProber([webapps(BSF)]))

    first = asyncio.run(backend.configure_roots([LOCAL, BSF]))
    second = asyncio.run(backend.configure_roots([LOCAL, BSF]))
    assert first == second == {LOCAL: "", BSF: webapps(BSF)}

    # A new configuration replaces the old mapping wholesale.
    third = asyncio.run(backend.configure_roots([BSFTST]))
    assert third == {BSFTST: ""}
    assert backend.asset_roots == {BSFTST: ""}


def test_asset_roots_is_a_copy():
    backend = windows_backend(FakeProber([webapps(BSF)]))
    asyncio.run(backend.configure_roots([BSF]))

    backend.asset_roots[BSF] = "tampered"

    assert backend.asset_roots == {BSF: webapps(BSF)}


def test_module_path_from_first_prerequisite():
    module_id = "DS/GEOCommonClient/Services/ServiceBase"
    local_module = str(PureWindowsPath(webapps(LOCAL), "GEOCommonClient/Services/ServiceBase.js"))
    prober = FakeProber([webapps(LOCAL), webapps(BSF), webapps(BSFTST), local_module])
    backend = windows_backend(prober)

    asyncio.run(backend.configure_roots([LOCAL, BSF, BSFTST]))
    path = asyncio.run(backend.get_module_path(module_id))

    assert path == local_module


def test_module_path_stops_at_first_hit():
    module_id = "DS/ApplicationFrame/PlayerButton"
    bsf_module = str(PureWindowsPath(webapps(BSF), "ApplicationFrame", "ApplicationFrame.js"))
    tst_module = str(PureWindowsPath(webapps(BSFTST), "ApplicationFrame", "ApplicationFrame.js"))
    prober = FakeProber([webapps(LOCAL), webapps(BSF), webapps(BSFTST), bsf_module, tst_module])
    backend = windows_backend(prober)
    asyncio.run(backend.configure_roots([LOCAL, BSF, BSFTST]))
    prober.probed.clear()

    path = asyncio.run(backend.get_module_path(module_id))

    assert path == bsf_module
    assert not any(p.startswith(webapps(BSFTST)) for p in prober.probed)


def test_unresolved_prerequisites_are_skipped():
    prober = FakeProber([webapps(BSF)])
    backend = windows_backend(prober)
    asyncio.run(backend.configure_roots([LOCAL, BSF]))
    prober.probed.clear()

    assert asyncio.run(backend.get_module_path("DS/Fake/Fake")) == ""
    assert all(p.startswith(webapps(BSF)) for p in prober.probed)


def test_roots_override_bypasses_cache():
    override_root = "E:\\Override\\webapps"
    module = str(PureWindowsPath(override_root, "UWA", "Core.js"))
    backend = windows_backend(FakeProber([webapps(BSF), module]))
    asyncio.run(backend.configure_roots([BSF]))

    path = asyncio.run(backend.get_module_path("UWA/Core", [override_root]))

    assert path == module
    # The cached mapping is untouched.
    assert backend.asset_roots == {BSF: webapps(BSF)}


def test_get_module_reads_content():
    module_id = "DS/ApplicationFrame/PlayerButton"
    expected_path = str(PureWindowsPath(webapps(BSF), "ApplicationFrame", "ApplicationFrame.js"))
    prober = FakeProber([webapps(LOCAL), webapps(BSF), expected_path])
    backend = windows_backend(prober)
    asyncio.run(backend.configure_roots([LOCAL, BSF]))

    data = asyncio.run(backend.get_module(module_id))

    assert data.content == "random data"
    assert data.location == expected_path
    assert prober.reads == [(expected_path, "utf-8")]


def test_get_module_missing_raises_not_found():
    backend = windows_backend(FakeProber([webapps(LOCAL), webapps(BSF), webapps(BSFTST)]))
    asyncio.run(backend.configure_roots([LOCAL, BSF, BSFTST]))

    with pytest.raises(ModuleNotFound) as excinfo:
        asyncio.run(backend.get_module("DS/Fake/Fake"))

    assert excinfo.value.module_id == "DS/Fake/Fake"
    assert str(excinfo.value) == "Unable to find file for: DS/Fake/Fake"


def test_prober_can_be_swapped_mid_session():
    backend = windows_backend(FakeProber([webapps(BSF)]))
    asyncio.run(backend.configure_roots([BSF]))
    assert asyncio.run(backend.get_module_path("UWA/Core")) == ""

    module = str(PureWindowsPath(webapps(BSF), "UWA", "Core.js"))
    backend.prober = FakeProber([module])

    assert asyncio.run(backend.get_module_path("UWA/Core")) == module


def test_local_filesystem_end_to_end(tmp_path: Path):
    # Debug build under linux_a64 for the first prerequisite...
    debug_root = tmp_path / "local"
    debug_file = debug_root / "linux_a64" / "webapps" / "GEOCommonClient" / "Services" / "ServiceBase.js"
    os.makedirs(debug_file.parent)
    debug_file.write_text("define('ServiceBase', [], {});", encoding="utf-8")

    # ...and a release build under win_b64 for the second.
    release_root = tmp_path / "bsf"
    release_file = release_root / "win_b64" / "webapps" / "ApplicationFrame" / "ApplicationFrame.js"
    os.makedirs(release_file.parent)
    release_file.write_text("/* bundle */", encoding="utf-8")

    empty_root = tmp_path / "empty"
    empty_root.mkdir()

    backend = FileBackend()
    mapping = asyncio.run(
        backend.configure_roots([str(empty_root), str(debug_root), str(release_root)])
    )
    assert mapping == {
        str(empty_root): "",
        str(debug_root): str(debug_root / "linux_a64" / "webapps"),
        str(release_root): str(release_root / "win_b64" / "webapps"),
    }

    service_base = asyncio.run(backend.get_module("DS/GEOCommonClient/Services/ServiceBase"))
    assert service_base.location == str(debug_file)
    assert service_base.content == "define('ServiceBase', [], {});"

    player_button = asyncio.run(backend.get_module("DS/ApplicationFrame/PlayerButton"))
    assert player_button.location == str(release_file)
    assert player_button.content == "/* bundle */"

    assert asyncio.run(backend.get_module_path("DS/Fake/Fake")) == ""


def test_get_module_cannot_escape_asset_root(tmp_path: Path):
    secret = tmp_path / "secret.js"
    secret.write_text("SECRET", encoding="utf-8")
    webapps_dir = tmp_path / "bsf" / "win_b64" / "webapps"
    os.makedirs(webapps_dir / "x")

    backend = FileBackend()
    asyncio.run(backend.configure_roots([str(tmp_path / "bsf")]))

    # x/../../../.. from webapps lands on tmp_path.
    with pytest.raises(ModuleNotFound):
        asyncio.run(backend.get_module("DS/x/../../../../secret"))

    # An absolute identifier would otherwise replace the asset root.
    with pytest.raises(ModuleNotFound):
        asyncio.run(backend.get_module(str(tmp_path / "secret")))

    assert asyncio.run(backend.get_module_path(str(tmp_path / "secret"))) == ""


def test_windows_identifier_cannot_escape_asset_root():
    outside = str(PureWindowsPath(BSF, "secret.js"))
    prober = FakeProber([webapps(BSF), outside, "C:\\secret.js"])
    backend = windows_backend(prober)
    asyncio.run(backend.configure_roots([BSF]))

    assert asyncio.run(backend.get_module_path("DS/x/../../../secret")) == ""
    assert asyncio.run(backend.get_module_path("C:\\secret")) == ""
    assert outside not in prober.probed


def test_configure_roots_swaps_mapping_in_one_step():
    class SlowProber(FakeProber):
        def __init__(self, existing, release):
            super().__init__(existing)
            self.release = release

        async def exists(self, path):
            await self.release.wait()
            return await super().exists(path)

    backend = windows_backend(FakeProber([webapps(BSF)]))
    asyncio.run(backend.configure_roots([BSF]))

    async def scenario():
        release = asyncio.Event()
        backend.prober = SlowProber([webapps(LOCAL), webapps(BSFTST)], release)
        task = asyncio.create_task(backend.configure_roots([LOCAL, BSFTST]))
        await asyncio.sleep(0)
        # Still resolving: readers see the previous mapping, never a partial one.
        during = backend.asset_roots
        release.set()
        return during, await task

    during, after = asyncio.run(scenario())

    assert during == {BSF: webapps(BSF)}
    assert after == {LOCAL: webapps(LOCAL), BSFTST: webapps(BSFTST)}
    assert backend.asset_roots == after
