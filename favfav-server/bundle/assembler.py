"""
Bundle Assembler
Runs the whole favicon pipeline: plan, resample, ICO, manifests, ZIP
"""
from collections.abc import Mapping as MappingABC
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union
import threading

from loguru import logger

from bundle.archive import write_archive
from config import settings
from errors import BuildCancelledError, InvalidOptionsError, NoSourceError
from ico.ico_encoder import encode_ico
from imaging.resampler import resample
from imaging.source_image import SourceImage
from manifests.emitters import (
    ANDROID_MANIFEST_PATH,
    BROWSERCONFIG_PATH,
    build_android_manifest,
    build_browserconfig,
)
from models import BuildMode, PlatformOptions
from planning.asset_plan import AssetPlan, TargetSpec, build_plan
from planning.source_selection import select_source

ICO_PATH = "favicon.ico"

Sources = Union[SourceImage, Mapping[int, Optional[SourceImage]]]


class BuildState(str, Enum):
    PENDING = "pending"
    PLANNING = "planning"
    RESAMPLING = "resampling"
    ICO_ENCODING = "ico_encoding"
    MANIFESTING = "manifesting"
    SERIALIZED = "serialized"
    FAILED = "failed"


@dataclass(frozen=True)
class GeneratedAsset:
    target: TargetSpec
    data: bytes


class Bundle(MappingABC):
    """Finished build: archive path -> bytes, plus the serialized ZIP"""

    def __init__(self, entries: Mapping[str, bytes], assets: List[GeneratedAsset], archive: bytes):
        self._entries = MappingProxyType(dict(entries))
        self.assets = tuple(assets)
        self.archive = archive

    def __getitem__(self, path: str) -> bytes:
        return self._entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Bundle({len(self)} entries, {len(self.archive)} bytes)"


class BundleAssembler:
    """
    One pipeline invocation

    States advance planning -> resampling -> ico_encoding -> manifesting ->
    serialized. Any error moves to failed and propagates; nothing partial
    is ever returned.
    """

    def __init__(
        self,
        mode,
        sources: Sources,
        options: PlatformOptions,
        cancel_event: Optional[threading.Event] = None,
        max_workers: Optional[int] = None,
    ):
        self.mode = BuildMode.parse(mode)
        self.sources = sources
        self.options = options
        self.cancel_event = cancel_event or threading.Event()
        self.max_workers = max_workers or settings.max_workers
        self.state = BuildState.PENDING

    def run(self) -> Bundle:
        try:
            return self._run()
        except Exception as e:
            failed_in = self.state
            self.state = BuildState.FAILED
            logger.error(f"❌ Favicon build failed during {failed_in.value}: {e}")
            raise

    def _run(self) -> Bundle:
        self._advance(BuildState.PLANNING)
        self.options.validate_for_build()
        uploads = self._normalize_sources()
        plan = build_plan(self.mode, list(uploads), self.options)
        logger.info(
            f"🧩 Planned {len(plan)} targets ({self.mode.value}, {len(uploads)} source(s))"
        )

        self._advance(BuildState.RESAMPLING)
        assets = self._resample_all(plan, uploads)

        self._advance(BuildState.ICO_ENCODING)
        entries: Dict[str, bytes] = {asset.target.destination_path: asset.data for asset in assets}
        ico_images = [asset.data for asset in assets if asset.target.is_ico_candidate]
        if ico_images:
            entries[ICO_PATH] = encode_ico(ico_images)
            logger.debug(f"favicon.ico holds {len(ico_images)} images")

        self._advance(BuildState.MANIFESTING)
        if self.options.include_android:
            entries[ANDROID_MANIFEST_PATH] = build_android_manifest(self.options, plan).encode("utf-8")
        if self.options.include_windows:
            entries[BROWSERCONFIG_PATH] = build_browserconfig(self.options, plan).encode("utf-8")

        self._check_cancelled()
        archive = write_archive(entries)
        self.state = BuildState.SERIALIZED
        logger.info(f"✅ Bundle ready: {len(entries)} files, {len(archive)} bytes")
        return Bundle(entries, assets, archive)

    def _advance(self, state: BuildState):
        self._check_cancelled()
        self.state = state

    def _check_cancelled(self):
        if self.cancel_event.is_set():
            raise BuildCancelledError("Favicon build was cancelled")

    def _normalize_sources(self) -> Dict[int, SourceImage]:
        if self.sources is None:
            raise NoSourceError("No source image supplied")

        if isinstance(self.sources, SourceImage):
            candidates = [self.sources]
            uploads = {}
        else:
            uploads = {size: image for size, image in self.sources.items() if image is not None}
            candidates = list(uploads.values())

        if not candidates:
            raise NoSourceError(f"No source image supplied for {self.mode.value} mode")

        if self.mode is BuildMode.SINGLE_SOURCE:
            if len(candidates) != 1:
                raise InvalidOptionsError(
                    f"single-source mode takes exactly one image, got {len(candidates)}"
                )
            source = candidates[0]
            return {source.native_size: source}

        if not uploads:
            # A lone image in per-size mode is keyed by its own size
            source = candidates[0]
            return {source.native_size: source}
        return uploads

    def _resample_all(self, plan: AssetPlan, uploads: Dict[int, SourceImage]) -> List[GeneratedAsset]:
        """Fan out one task per unique (source, size), then join before returning"""
        resolved: Dict[TargetSpec, bytes] = {}
        pending: Dict[Tuple[SourceImage, int], Future] = {}
        assignments: List[Tuple[TargetSpec, Tuple[SourceImage, int]]] = []

        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="favfav-resample")
        try:
            for target in plan:
                self._check_cancelled()
                source, is_exact = select_source(target, uploads)

                if is_exact and self.mode is BuildMode.PER_SIZE_SOURCE and self._is_passthrough(source, target):
                    resolved[target] = source.data
                    continue

                key = (source, target.pixel_size)
                if key not in pending:
                    pending[key] = executor.submit(self._render, source, target.pixel_size)
                assignments.append((target, key))

            if pending:
                done, not_done = wait(pending.values(), return_when=FIRST_EXCEPTION)
                for future in not_done:
                    future.cancel()
                for future in pending.values():
                    if future in done and future.exception() is not None:
                        raise future.exception()
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        for target, key in assignments:
            resolved[target] = pending[key].result()

        reused = len(assignments) - len(pending)
        if reused:
            logger.debug(f"Reused {reused} resampled buffer(s)")

        return [GeneratedAsset(target, resolved[target]) for target in plan]

    @staticmethod
    def _is_passthrough(source: SourceImage, target: TargetSpec) -> bool:
        return source.is_square_png and source.width == target.pixel_size

    def _render(self, source: SourceImage, size: int) -> bytes:
        self._check_cancelled()
        return resample(source, size)


def generate_bundle(
    mode,
    sources: Sources,
    options: Optional[PlatformOptions] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Bundle:
    """
    Build a complete favicon bundle

    Args:
        mode: "single-source" or "per-size-source" (or "simple"/"advanced")
        sources: One SourceImage, or a mapping of pixel size -> SourceImage
        options: Platform flags and PWA metadata
        cancel_event: Set it from another thread to abort the build

    Returns:
        Bundle mapping archive paths to bytes; bundle.archive holds the ZIP
    """
    assembler = BundleAssembler(mode, sources, options or PlatformOptions(), cancel_event)
    return assembler.run()
