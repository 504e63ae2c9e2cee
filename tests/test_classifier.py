"""
Tests for LinkageClassifier and DependencyResolver.
"""

import pytest
from pathlib import Path


class TestLinkageClassifier:
    """Classification from prober reports."""

    @pytest.mark.unit
    def test_dynamic_report(self, fake_prober, system_libs):
        from lib4bin.classifier import LinkageClassifier
        from lib4bin.models import Binary, Linkage

        fake_prober.add_dynamic(Path("/usr/bin/curl"), [system_libs["libc"]])
        binary = LinkageClassifier(fake_prober).classify(Binary(path=Path("/usr/bin/curl")))

        assert binary.linkage is Linkage.DYNAMIC
        assert binary.is_dynamic

    @pytest.mark.unit
    @pytest.mark.parametrize("report", [
        "\tnot a dynamic executable",
        "ldd: /bin/busybox: Not a valid dynamic program",
        "\tstatically linked",
        "NOT A DYNAMIC EXECUTABLE",
    ])
    def test_static_markers(self, fake_prober, report):
        from lib4bin.classifier import LinkageClassifier
        from lib4bin.models import Binary, Linkage

        fake_prober.reports["/bin/busybox"] = report
        binary = LinkageClassifier(fake_prober).classify(Binary(path=Path("/bin/busybox")))

        assert binary.linkage is Linkage.STATIC

    @pytest.mark.unit
    def test_probe_failure_falls_back_to_static(self, fake_prober):
        from lib4bin.classifier import LinkageClassifier
        from lib4bin.models import Binary, Linkage

        binary = LinkageClassifier(fake_prober).classify(Binary(path=Path("/tmp/script.sh")))
        assert binary.linkage is Linkage.STATIC

    @pytest.mark.unit
    def test_classify_returns_new_binary(self, fake_prober):
        from lib4bin.classifier import LinkageClassifier
        from lib4bin.models import Binary, Linkage

        original = Binary(path=Path("/bin/x"))
        classified = LinkageClassifier(fake_prober).classify(original)

        assert original.linkage is Linkage.UNKNOWN
        assert classified.path == original.path


class TestDependencyResolver:
    """Closure resolution."""

    @pytest.mark.unit
    def test_resolve_returns_libraries_in_order(self, fake_prober, system_libs):
        from lib4bin.models import Binary, Linkage
        from lib4bin.resolver import DependencyResolver

        libs = [system_libs["libm"], system_libs["libc"], system_libs["loader"]]
        fake_prober.add_dynamic(Path("/bin/app"), libs)
        binary = Binary(path=Path("/bin/app"), linkage=Linkage.DYNAMIC)

        resolved = DependencyResolver(fake_prober).resolve(binary)

        assert [lib.source for lib in resolved] == libs
        assert [lib.base_name for lib in resolved] == [
            "libm.so.6", "libc.so.6", "ld-linux-x86-64.so.2",
        ]

    @pytest.mark.unit
    def test_resolve_drops_repeated_paths(self, fake_prober, system_libs):
        from lib4bin.models import Binary, Linkage
        from lib4bin.resolver import DependencyResolver

        fake_prober.dependencies["/bin/app"] = [
            str(system_libs["libc"]), str(system_libs["libc"]),
        ]
        binary = Binary(path=Path("/bin/app"), linkage=Linkage.DYNAMIC)

        assert len(DependencyResolver(fake_prober).resolve(binary)) == 1

    @pytest.mark.unit
    def test_resolve_refuses_static_binary(self, fake_prober):
        from lib4bin.models import Binary, Linkage
        from lib4bin.resolver import DependencyResolver
        from common.exceptions import ResolutionError

        with pytest.raises(ResolutionError):
            DependencyResolver(fake_prober).resolve(
                Binary(path=Path("/bin/busybox"), linkage=Linkage.STATIC)
            )

    @pytest.mark.unit
    def test_prober_failure_becomes_resolution_error(self, fake_prober):
        from lib4bin.models import Binary, Linkage
        from lib4bin.resolver import DependencyResolver
        from common.exceptions import ProberError, ResolutionError

        binary = Binary(path=Path("/bin/app"), linkage=Linkage.DYNAMIC)
        with pytest.raises(ResolutionError) as exc_info:
            DependencyResolver(fake_prober).resolve(binary)

        assert isinstance(exc_info.value.cause, ProberError)
        assert exc_info.value.code == "RESOLUTION_FAILED"

    @pytest.mark.unit
    def test_empty_closure_is_an_error(self, fake_prober):
        from lib4bin.models import Binary, Linkage
        from lib4bin.resolver import DependencyResolver
        from common.exceptions import ResolutionError

        fake_prober.dependencies["/bin/app"] = []
        with pytest.raises(ResolutionError):
            DependencyResolver(fake_prober).resolve(
                Binary(path=Path("/bin/app"), linkage=Linkage.DYNAMIC)
            )
