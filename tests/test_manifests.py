import json
import xml.etree.ElementTree as ET

from manifests.emitters import build_android_manifest, build_browserconfig
from models import PlatformOptions
from planning.asset_plan import build_plan


def test_android_manifest_lists_android_icons():
    options = PlatformOptions(include_android=True, app_name="Acme", short_name="A", theme_color="#112233")
    plan = build_plan("single-source", [512], options)
    manifest = json.loads(build_android_manifest(options, plan))

    assert manifest["name"] == "Acme"
    assert manifest["short_name"] == "A"
    assert manifest["theme_color"] == "#112233"
    assert manifest["background_color"] == "#ffffff"
    assert manifest["display"] == "standalone"
    assert manifest["icons"] == [
        {"src": f"android/android-chrome-{n}x{n}.png", "sizes": f"{n}x{n}", "type": "image/png"}
        for n in (192, 196, 512)
    ]


def test_browserconfig_tiles():
    options = PlatformOptions(include_windows=True, theme_color="#6366f1")
    plan = build_plan("single-source", [512], options)
    root = ET.fromstring(build_browserconfig(options, plan))
    tile = root.find("msapplication/tile")

    assert [child.tag for child in tile] == [
        "square70x70logo",
        "TileImage",
        "square150x150logo",
        "square310x310logo",
        "TileColor",
    ]
    assert tile.find("square150x150logo").get("src") == "windows/mstile-150x150.png"
    assert tile.find("TileImage").get("src") == "windows/mstile-144x144.png"
    assert tile.find("TileColor").text == "#6366f1"


def test_browserconfig_escapes_theme_color():
    options = PlatformOptions(include_windows=True, theme_color="red&<blue>")
    plan = build_plan("single-source", [512], options)
    root = ET.fromstring(build_browserconfig(options, plan))
    assert root.find("msapplication/tile/TileColor").text == "red&<blue>"


def test_emitters_are_deterministic():
    options = PlatformOptions(include_android=True, include_windows=True)
    plan = build_plan("single-source", [512], options)
    assert build_android_manifest(options, plan) == build_android_manifest(options, plan)
    assert build_browserconfig(options, plan) == build_browserconfig(options, plan)
