"""Tests for terrain color classification."""

from teletext.colors import ClassifierThresholds, TerrainColor, classify


def test_reference_colors():
    assert classify(0, 0, 255) == TerrainColor.WATER
    assert classify(0, 255, 0) == TerrainColor.VEGETATION
    assert classify(255, 255, 255) == TerrainColor.LIGHT_SURFACE
    assert classify(128, 128, 128) == TerrainColor.DARK_SURFACE
    assert classify(100, 150, 50) == TerrainColor.DEFAULT


def test_dominance_margin_is_strict():
    """Blue must exceed the other channels by more than 20."""
    assert classify(100, 100, 121) == TerrainColor.WATER
    # 120 is exactly 20 above and not grey either (|g-b| == 20)
    assert classify(100, 100, 120) == TerrainColor.DEFAULT
    assert classify(100, 121, 100) == TerrainColor.VEGETATION
    assert classify(100, 120, 100) == TerrainColor.DEFAULT


def test_water_checked_before_vegetation():
    """Blue wins when both blue and green could qualify in order."""
    assert classify(0, 100, 200) == TerrainColor.WATER
    assert classify(0, 200, 100) == TerrainColor.VEGETATION


def test_light_level_boundary():
    assert classify(201, 201, 201) == TerrainColor.LIGHT_SURFACE
    assert classify(200, 200, 200) == TerrainColor.DARK_SURFACE
    assert classify(10, 10, 10) == TerrainColor.DARK_SURFACE


def test_red_dominant_is_default():
    assert classify(255, 0, 0) == TerrainColor.DEFAULT


def test_fractional_means():
    assert classify(10.5, 10.2, 29.9) == TerrainColor.DARK_SURFACE
    assert classify(10.0, 10.0, 30.5) == TerrainColor.WATER


def test_custom_thresholds():
    loose = ClassifierThresholds(dominance_margin=5, grey_tolerance=3, light_level=100)
    assert classify(100, 100, 110, loose) == TerrainColor.WATER
    assert classify(150, 151, 152, loose) == TerrainColor.LIGHT_SURFACE
    assert classify(100, 104, 100, loose) == TerrainColor.DEFAULT


def test_colors_carry_styles():
    for color in TerrainColor:
        assert isinstance(color.style, str) and color.style
    assert TerrainColor.LIGHT_SURFACE.label == "light_surface"
