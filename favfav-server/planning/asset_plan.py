"""
Asset Plan Builder
Turns mode + platform flags into the ordered list of files to render
"""
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Tuple

from loguru import logger

from errors import InvalidOptionsError, NoSourceError
from models import BuildMode, PlatformOptions

CORE_SIZES: Tuple[int, ...] = (16, 32, 48, 64, 128, 144, 192, 256)
PWA_CORE_SIZE = 512
APPLE_SIZES: Tuple[int, ...] = (120, 152, 167, 180)
ANDROID_SIZES: Tuple[int, ...] = (192, 196, 512)
WINDOWS_SIZES: Tuple[int, ...] = (70, 144, 150, 310)

# Largest edge embedded in favicon.ico
ICO_MAX_SIZE = 256


class Platform(str, Enum):
    CORE = "core"
    APPLE = "apple"
    ANDROID = "android"
    WINDOWS = "windows"


PATH_TEMPLATES = {
    Platform.CORE: "favicon-{n}x{n}.png",
    Platform.APPLE: "apple/apple-touch-icon-{n}x{n}.png",
    Platform.ANDROID: "android/android-chrome-{n}x{n}.png",
    Platform.WINDOWS: "windows/mstile-{n}x{n}.png",
}


@dataclass(frozen=True)
class TargetSpec:
    pixel_size: int
    platform: Platform
    destination_path: str

    @property
    def is_ico_candidate(self) -> bool:
        return self.platform is Platform.CORE and self.pixel_size <= ICO_MAX_SIZE


AssetPlan = Tuple[TargetSpec, ...]


def core_sizes(options: PlatformOptions) -> Tuple[int, ...]:
    """Core favicon sizes for this build; 512 only when explicitly enabled"""
    if options.core_includes_512:
        return CORE_SIZES + (PWA_CORE_SIZE,)
    return CORE_SIZES


def destination_path(platform: Platform, size: int) -> str:
    return PATH_TEMPLATES[platform].format(n=size)


def build_plan(mode, uploaded_sizes: Iterable[int], options: PlatformOptions) -> AssetPlan:
    """
    Compute every (size, platform, path) the bundle must contain

    Order is core sizes ascending, then Apple, Android and Windows sizes.
    A size shared by two platforms yields two targets with distinct paths.

    Args:
        mode: BuildMode (or one of its string aliases)
        uploaded_sizes: Sizes of the supplied sources
        options: Platform flags

    Returns:
        Tuple of TargetSpec
    """
    mode = BuildMode.parse(mode)
    uploaded_sizes = list(uploaded_sizes)

    if not uploaded_sizes:
        raise NoSourceError(f"No source image supplied for {mode.value} mode")
    if any(size <= 0 for size in uploaded_sizes):
        raise InvalidOptionsError(f"Uploaded sizes must be positive: {uploaded_sizes}")
    if mode is BuildMode.SINGLE_SOURCE and len(uploaded_sizes) != 1:
        raise InvalidOptionsError(
            f"single-source mode takes exactly one image, got {len(uploaded_sizes)}"
        )

    groups: List[Tuple[Platform, Tuple[int, ...]]] = [(Platform.CORE, core_sizes(options))]
    if options.include_apple:
        groups.append((Platform.APPLE, APPLE_SIZES))
    if options.include_android:
        groups.append((Platform.ANDROID, ANDROID_SIZES))
    if options.include_windows:
        groups.append((Platform.WINDOWS, WINDOWS_SIZES))

    plan: List[TargetSpec] = []
    seen = set()
    for platform, sizes in groups:
        for size in sizes:
            if (size, platform) in seen:
                continue
            seen.add((size, platform))
            plan.append(TargetSpec(size, platform, destination_path(platform, size)))

    if mode is BuildMode.PER_SIZE_SOURCE:
        planned_sizes = {target.pixel_size for target in plan}
        unused = sorted(set(uploaded_sizes) - planned_sizes)
        if unused:
            logger.debug(f"Uploaded sizes {unused} match no target; used only as resampling sources")

    return tuple(plan)


def ico_candidates(plan: Iterable[TargetSpec]) -> List[TargetSpec]:
    """Targets that go into favicon.ico, in plan order"""
    return [target for target in plan if target.is_ico_candidate]
