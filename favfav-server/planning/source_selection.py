"""
Source Selection Policy
Picks which upload a target is rendered from
"""
from typing import Mapping, Tuple

from errors import NoSourceError
from imaging.source_image import SourceImage
from planning.asset_plan import TargetSpec


def select_source(target: TargetSpec, uploads: Mapping[int, SourceImage]) -> Tuple[SourceImage, bool]:
    """
    Choose the upload to render a target from

    An upload keyed by the target's exact size wins. Otherwise the upload
    with the largest key is used (first one seen on ties) and will be
    resampled up or down.

    Returns:
        (source, is_exact_match)
    """
    if not uploads:
        raise NoSourceError(f"No source image available for {target.destination_path}")

    exact = uploads.get(target.pixel_size)
    if exact is not None:
        return exact, True

    largest_size = None
    for size in uploads:
        if largest_size is None or size > largest_size:
            largest_size = size
    return uploads[largest_size], False
