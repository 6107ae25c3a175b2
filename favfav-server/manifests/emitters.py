"""
Manifest Emitters
Android/PWA manifest.json and Windows browserconfig.xml
"""
from typing import Iterable, List
from xml.sax.saxutils import escape, quoteattr
import json

from models import PlatformOptions
from planning.asset_plan import Platform, TargetSpec

ANDROID_MANIFEST_PATH = "android/manifest.json"
BROWSERCONFIG_PATH = "windows/browserconfig.xml"

BACKGROUND_COLOR = "#ffffff"
DISPLAY_MODE = "standalone"

WINDOWS_SQUARE_SIZES = (70, 150, 310)
WINDOWS_TILE_IMAGE_SIZE = 144


def _for_platform(targets: Iterable[TargetSpec], platform: Platform) -> List[TargetSpec]:
    return [t for t in targets if t.platform is platform]


def build_android_manifest(options: PlatformOptions, targets: Iterable[TargetSpec]) -> str:
    """Web app manifest listing every Android icon that was generated"""
    manifest = {
        "name": options.app_name,
        "short_name": options.short_name,
        "icons": [
            {
                "src": target.destination_path,
                "sizes": f"{target.pixel_size}x{target.pixel_size}",
                "type": "image/png",
            }
            for target in _for_platform(targets, Platform.ANDROID)
        ],
        "theme_color": options.theme_color,
        "background_color": BACKGROUND_COLOR,
        "display": DISPLAY_MODE,
    }
    return json.dumps(manifest, indent=2)


def build_browserconfig(options: PlatformOptions, targets: Iterable[TargetSpec]) -> str:
    """
    browserconfig.xml for Windows pinned-site tiles

    70/150/310 become <squareNxNlogo> entries; 144 is the legacy TileImage.
    """
    tile = []
    for target in _for_platform(targets, Platform.WINDOWS):
        size = target.pixel_size
        src = quoteattr(target.destination_path)
        if size in WINDOWS_SQUARE_SIZES:
            tile.append(f"<square{size}x{size}logo src={src}/>")
        elif size == WINDOWS_TILE_IMAGE_SIZE:
            tile.append(f"<TileImage src={src}/>")
    tile.append(f"<TileColor>{escape(options.theme_color)}</TileColor>")

    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        "<browserconfig>\n"
        "  <msapplication>\n"
        "    <tile>\n"
        + "".join(f"      {line}\n" for line in tile)
        + "    </tile>\n"
        "  </msapplication>\n"
        "</browserconfig>\n"
    )
