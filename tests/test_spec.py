import warnings

import pytest

from gladbuild.errors import MalformedSpecError
from gladbuild.spec import ApiSpec, ProfileIgnoredWarning, resolve, resolve_all


def test_resolve_splits_family_profile_and_version() -> None:
    assert resolve("gl:core=3.3") == ApiSpec(family="gl", profile="core", version="3.3")


def test_resolve_without_profile_yields_empty_profile() -> None:
    assert resolve("vulkan=1.1") == ApiSpec(family="vulkan", profile="", version="1.1")


def test_resolve_compatibility_profile() -> None:
    spec = resolve("gl:compatibility=4.0")
    assert spec.family == "gl"
    assert spec.profile == "compatibility"
    assert spec.version == "4.0"


def test_resolve_keeps_everything_after_first_colon_as_profile() -> None:
    assert resolve("gl:core:extra=3.3").profile == "core:extra"


def test_resolve_version_is_opaque() -> None:
    assert resolve("gles2=2.0-rc").version == "2.0-rc"


def test_resolve_is_idempotent() -> None:
    assert resolve("gl:core=3.3") == resolve("gl:core=3.3")


@pytest.mark.parametrize("token", ["bogus", "gl:core", "gl=3.3=4.0", "=3.3", ":core=3.3", "gl="])
def test_resolve_rejects_malformed_tokens(token: str) -> None:
    with pytest.raises(MalformedSpecError) as excinfo:
        resolve(token)

    assert excinfo.value.code == "E_MALFORMED_SPEC"
    assert excinfo.value.context["operation"] == "resolve"
    assert excinfo.value.hint is not None


def test_resolve_does_not_check_family_membership() -> None:
    assert resolve("bogus=1.0").family == "bogus"


def test_resolve_warns_on_profile_for_unprofiled_family() -> None:
    with pytest.warns(ProfileIgnoredWarning):
        spec = resolve("vulkan:core=1.1")
    assert spec.profile == "core"


def test_resolve_gl_profile_does_not_warn() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        resolve("gl:core=3.3")


def test_api_spec_renders_back_to_token() -> None:
    assert str(resolve("gl:core=3.3")) == "gl:core=3.3"
    assert str(resolve("vulkan=1.1")) == "vulkan=1.1"


def test_resolve_all_accepts_comma_separated_groups() -> None:
    specs = resolve_all(["gl:core=4.2,gles2=2.0", "egl=1.5"])

    assert [spec.family for spec in specs] == ["gl", "gles2", "egl"]


def test_resolve_all_skips_empty_entries() -> None:
    assert resolve_all(["gl=3.3,", ""]) == (ApiSpec(family="gl", profile="", version="3.3"),)
