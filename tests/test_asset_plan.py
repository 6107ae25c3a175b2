import pytest

from errors import InvalidOptionsError, NoSourceError
from models import BuildMode, PlatformOptions
from planning.asset_plan import (
    CORE_SIZES,
    Platform,
    build_plan,
    ico_candidates,
)


def paths(plan):
    return [t.destination_path for t in plan]


def test_default_plan_is_core_only():
    plan = build_plan("single-source", [512], PlatformOptions())
    assert [t.pixel_size for t in plan] == list(CORE_SIZES)
    assert paths(plan) == [f"favicon-{n}x{n}.png" for n in CORE_SIZES]
    assert all(t.platform is Platform.CORE for t in plan)


def test_apple_targets_are_not_ico_candidates():
    plan = build_plan("single-source", [512], PlatformOptions(include_apple=True))
    apple = [t for t in plan if t.platform is Platform.APPLE]
    assert paths(apple) == [
        "apple/apple-touch-icon-120x120.png",
        "apple/apple-touch-icon-152x152.png",
        "apple/apple-touch-icon-167x167.png",
        "apple/apple-touch-icon-180x180.png",
    ]
    assert not any(t.is_ico_candidate for t in apple)


def test_shared_size_yields_two_targets():
    plan = build_plan("single-source", [512], PlatformOptions(include_android=True))
    at_192 = [t.destination_path for t in plan if t.pixel_size == 192]
    assert at_192 == ["favicon-192x192.png", "android/android-chrome-192x192.png"]


def test_windows_paths():
    plan = build_plan("single-source", [512], PlatformOptions(include_windows=True))
    windows = [t for t in plan if t.platform is Platform.WINDOWS]
    assert paths(windows) == [f"windows/mstile-{n}x{n}.png" for n in (70, 144, 150, 310)]


def test_destination_paths_unique_with_every_platform():
    options = PlatformOptions(include_apple=True, include_android=True, include_windows=True)
    plan = build_plan("per-size-source", [16, 512], options)
    assert len(paths(plan)) == len(set(paths(plan)))


def test_ico_candidates_are_core_up_to_256():
    options = PlatformOptions(include_android=True, core_includes_512=True)
    plan = build_plan("single-source", [512], options)
    candidates = ico_candidates(plan)
    assert [t.pixel_size for t in candidates] == list(CORE_SIZES)
    assert candidates[-1].pixel_size == 256
    assert not any(t.pixel_size == 512 for t in candidates)


def test_core_512_is_opt_in():
    plan = build_plan("single-source", [512], PlatformOptions(core_includes_512=True))
    assert paths(plan)[-1] == "favicon-512x512.png"
    assert not plan[-1].is_ico_candidate


def test_mode_aliases():
    assert BuildMode.parse("simple") is BuildMode.SINGLE_SOURCE
    assert BuildMode.parse("advanced") is BuildMode.PER_SIZE_SOURCE
    assert BuildMode.parse("per-size-source") is BuildMode.PER_SIZE_SOURCE


def test_unknown_mode_rejected():
    with pytest.raises(InvalidOptionsError):
        build_plan("fancy", [16], PlatformOptions())


def test_no_uploads_rejected():
    with pytest.raises(NoSourceError):
        build_plan("per-size-source", [], PlatformOptions())


def test_non_positive_upload_size_rejected():
    with pytest.raises(InvalidOptionsError):
        build_plan("per-size-source", [0, 32], PlatformOptions())


def test_single_source_takes_one_image():
    with pytest.raises(InvalidOptionsError):
        build_plan("single-source", [16, 32], PlatformOptions())


def test_plan_ignores_upload_sizes_for_targets():
    plan = build_plan("per-size-source", [999], PlatformOptions())
    assert [t.pixel_size for t in plan] == list(CORE_SIZES)
