"""Tests for multi-image stitching, including the degraded fallback."""
import cv2
import numpy as np
import pytest

from photopano.models.panorama import SourceImage, StitchOptions

from conftest import decode, draw_sample, encode_sample


def _sources(*sizes, ext=".jpg"):
    return [SourceImage.from_bytes(encode_sample(w, h, seed=i, ext=ext))
            for i, (w, h) in enumerate(sizes)]


def test_single_image_is_rejected(engine):
    result = engine.stitch(_sources((1000, 500)), StitchOptions())

    assert not result.success
    assert result.error == "At least 2 images required for stitching"
    assert result.image_bytes is None


def test_horizontal_dimensions(engine):
    result = engine.stitch(_sources((1000, 500), (1000, 500)),
                           StitchOptions(layout="horizontal", overlap=0.1))

    assert result.success
    assert result.method == "horizontal"
    assert result.dimensions.to_dict() == {'width': 1900, 'height': 500}
    assert decode(result.image_bytes).shape == (500, 1900, 3)


def test_horizontal_centres_shorter_images(lossless_engine):
    sources = _sources((600, 400), (600, 200), ext=".png")
    result = lossless_engine.stitch(sources, StitchOptions(layout="horizontal", overlap=0.0))
    canvas = decode(result.image_bytes)

    assert canvas.shape == (400, 1200, 3)
    assert np.array_equal(canvas[:, :600], draw_sample(600, 400, seed=0))
    assert np.array_equal(canvas[100:300, 600:], draw_sample(600, 200, seed=1))
    assert not canvas[:100, 600:].any()
    assert not canvas[300:, 600:].any()


def test_later_images_overlap_earlier_ones(lossless_engine):
    sources = _sources((500, 300), (500, 300), (500, 300), ext=".png")
    result = lossless_engine.stitch(sources, StitchOptions(layout="horizontal", overlap=0.2))
    canvas = decode(result.image_bytes)

    # 400 + 400 + 400 + 100
    assert canvas.shape == (300, 1300, 3)
    assert np.array_equal(canvas[:, 800:], draw_sample(500, 300, seed=2))
    assert np.array_equal(canvas[:, 400:800], draw_sample(500, 300, seed=1)[:, :400])


def test_vertical_dimensions(lossless_engine):
    sources = _sources((800, 400), (600, 400), ext=".png")
    result = lossless_engine.stitch(sources, StitchOptions(layout="vertical", overlap=0.25))
    canvas = decode(result.image_bytes)

    assert result.dimensions.to_dict() == {'width': 800, 'height': 700}
    assert canvas.shape == (700, 800, 3)
    assert np.array_equal(canvas[300:, 100:700], draw_sample(600, 400, seed=1))


@pytest.mark.parametrize("sizes", [
    [(1000, 500), (1000, 500)],
    [(640, 480), (1024, 768), (800, 1200)],
    [(3000, 1000), (3000, 1000)],
    [(3000, 1000), (1201, 1000)],
])
def test_panoramic_is_two_to_one(engine, sizes):
    result = engine.stitch(_sources(*sizes), StitchOptions(layout="panoramic", overlap=0.0))

    width, height = result.dimensions.width, result.dimensions.height
    assert result.method == "panoramic"
    assert width >= 4096
    assert height * 2 == width
    assert decode(result.image_bytes).shape == (height, width, 3)


def test_panoramic_rounds_odd_width_up(engine):
    # 3000 + 1201 = 4201 wide composite
    result = engine.stitch(_sources((3000, 1000), (1201, 1000)),
                           StitchOptions(layout="panoramic", overlap=0.0))

    assert result.dimensions.to_dict() == {'width': 4202, 'height': 2101}


def test_panoramic_stretches_instead_of_cropping(lossless_engine):
    sources = _sources((1000, 500), (1000, 500), ext=".png")
    horizontal = decode(lossless_engine.stitch(
        sources, StitchOptions(layout="horizontal", overlap=0.1)).image_bytes)

    result = lossless_engine.stitch(sources, StitchOptions(layout="panoramic", overlap=0.1))
    panorama = decode(result.image_bytes)

    # Known distortion, kept as is: the whole 1900x500 composite is stretched
    # to 4096x2048, about 2.2x more vertically than horizontally.
    assert horizontal.shape == (500, 1900, 3)
    assert panorama.shape == (2048, 4096, 3)
    expected = cv2.resize(horizontal, (4096, 2048), interpolation=cv2.INTER_LINEAR)
    assert np.abs(panorama.astype(int) - expected.astype(int)).max() <= 1

    # no letterbox or padding on any edge
    for edge in (panorama[0], panorama[-1], panorama[:, 0], panorama[:, -1]):
        assert edge.any()


def test_panoramic_keeps_wide_composites(engine):
    result = engine.stitch(_sources((3000, 1000), (3000, 1000)),
                           StitchOptions(layout="panoramic", overlap=0.0))

    assert result.dimensions.to_dict() == {'width': 6000, 'height': 3000}


def test_options_from_request_dict(engine):
    result = engine.stitch(_sources((1000, 500), (1000, 500)),
                           {'method': 'horizontal', 'overlap': 0.5, 'quality': 70})

    assert result.success
    assert result.dimensions.width == 1500


def test_unsupported_layout_is_returned(engine):
    result = engine.stitch(_sources((1000, 500), (1000, 500)), {'layout': 'spiral'})

    assert not result.success
    assert result.error == "Unsupported stitching method: spiral"


def test_invalid_options_are_returned(engine):
    result = engine.stitch(_sources((1000, 500), (1000, 500)), {'overlap': 1.5})

    assert not result.success
    assert "overlap" in result.error


def test_invalid_options_rejected_on_construction():
    with pytest.raises(ValueError):
        StitchOptions(quality_percent=0)


def test_unreadable_image_is_returned(engine):
    sources = _sources((1000, 500)) + [SourceImage.from_bytes(b"broken")]

    result = engine.stitch(sources, StitchOptions())

    assert not result.success
    assert "Could not load image" in result.error


def test_degraded_stitch_returns_first_image(degraded_engine):
    sources = _sources((1000, 500), (800, 600))

    result = degraded_engine.stitch(sources, StitchOptions(layout="panoramic"))

    assert result.success
    assert result.method == "panoramic_fallback"
    assert result.image_bytes == sources[0].read_bytes()
    # claimed size is the nominal panorama, not the size of the returned bytes
    assert result.dimensions.to_dict() == {'width': 4096, 'height': 2048}
    assert decode(result.image_bytes).shape == (500, 1000, 3)


def test_degraded_stitch_still_needs_two_images(degraded_engine):
    result = degraded_engine.stitch(_sources((1000, 500)), StitchOptions())

    assert not result.success
    assert result.error == "At least 2 images required for stitching"
