from kaiki.diff.render import (
    ImageData,
    draw_pixel_aa,
    draw_pixel_diff,
    draw_pixel_same,
    expand_image,
)


def test_expand_image_no_change():
    img = ImageData(width=2, height=2, data=bytes(16))
    assert expand_image(img, 2, 2) is None


def test_expand_image_larger():
    img = ImageData(width=1, height=1, data=bytes([255, 0, 0, 255]))
    expanded = expand_image(img, 2, 2)
    assert expanded.width == 2
    assert expanded.height == 2
    assert list(expanded.data[0:4]) == [255, 0, 0, 255]
    assert list(expanded.data[4:8]) == [0, 0, 0, 0]
    assert len(expanded.data) == 16


def test_expand_image_keeps_rows_in_place():
    img = ImageData(width=2, height=2, data=bytes(range(1, 17)))
    expanded = expand_image(img, 3, 3)
    assert list(expanded.data[0:8]) == list(range(1, 9))
    assert list(expanded.data[8:12]) == [0, 0, 0, 0]
    assert list(expanded.data[12:20]) == list(range(9, 17))
    assert list(expanded.data[24:36]) == [0] * 12


def test_draw_pixel_diff_positive_delta():
    output = bytearray(4)
    draw_pixel_diff(output, 0, 1.0, (255, 119, 119), None)
    assert list(output) == [255, 119, 119, 255]


def test_draw_pixel_diff_negative_delta():
    output = bytearray(4)
    draw_pixel_diff(output, 0, -1.0, (255, 119, 119), None)
    assert list(output) == [255, 119, 119, 255]


def test_draw_pixel_diff_negative_delta_with_alt():
    output = bytearray(4)
    draw_pixel_diff(output, 0, -1.0, (255, 119, 119), (255, 0, 0))
    assert list(output) == [255, 0, 0, 255]


def test_draw_pixel_diff_positive_delta_with_alt():
    output = bytearray(4)
    draw_pixel_diff(output, 0, 1.0, (255, 119, 119), (255, 0, 0))
    assert list(output) == [255, 119, 119, 255]


def test_draw_pixel_diff_writes_only_at_pos():
    output = bytearray(8)
    draw_pixel_diff(output, 4, 1.0, (1, 2, 3), None)
    assert list(output) == [0, 0, 0, 0, 1, 2, 3, 255]


def test_draw_pixel_same_opaque_white():
    output = bytearray(4)
    draw_pixel_same(output, 0, bytes([255, 255, 255, 255]), 0.1)
    assert output[3] == 255
    assert output[0] == output[1] == output[2]


def test_draw_pixel_same_opaque_black_full_alpha():
    output = bytearray(4)
    draw_pixel_same(output, 0, bytes([0, 0, 0, 255]), 1.0)
    assert list(output) == [0, 0, 0, 255]


def test_draw_pixel_same_transparent_is_white():
    output = bytearray(4)
    draw_pixel_same(output, 0, bytes([0, 0, 0, 0]), 1.0)
    assert list(output) == [255, 255, 255, 255]


def test_draw_pixel_aa():
    output = bytearray(4)
    draw_pixel_aa(output, 0, (255, 255, 0))
    assert list(output) == [255, 255, 0, 255]


def test_draw_pixel_aa_custom_color():
    output = bytearray(4)
    draw_pixel_aa(output, 0, (0, 128, 255))
    assert list(output) == [0, 128, 255, 255]