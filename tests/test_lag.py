import struct

import pytest

from broomkit.lag import (
    LagEntry,
    LagError,
    PixelFormat,
    append_image,
    convert_pixels,
    data_size,
    decode_pixels,
    dither4,
    dither5,
    encode_pixels,
    iter_entries,
    read_image,
    write_header,
)

PIXELS = [(1, 2, 3, 4), (10, 20, 30, 40), (255, 0, 128, 255), (0, 0, 0, 0)]


@pytest.mark.parametrize(
    "fmt, bpp",
    [
        (PixelFormat.A4R4G4B4, 2),
        (PixelFormat.A8R8G8B8, 4),
        (PixelFormat.A16R16G16B16, 8),
        (PixelFormat.FLOAT, 16),
    ],
)
def test_data_size(fmt, bpp):
    assert data_size(3, 5, fmt) == 15 * bpp


def test_data_size_rejects_negative():
    with pytest.raises(LagError):
        data_size(-1, 2, PixelFormat.A8R8G8B8)


def test_dither_zero_at_origin():
    assert dither4(0, 0, 0) == 0
    assert dither5(0, 0, 0) == 0


@pytest.mark.parametrize("c", [0, 17, 128, 255])
def test_dither_offsets_bounded(c):
    base5 = dither5(c, 0, 0)
    base4 = dither4(c, 0, 0)
    for x in range(4):
        for y in range(4):
            assert 0 <= dither5(c, x, y) - base5 <= 7
            assert 0 <= dither4(c, x, y) - base4 <= 14
            assert dither5(c, x, y) == dither5(c, x + 4, y + 4)


def test_a8_wire_order_is_bgra():
    assert encode_pixels([(1, 2, 3, 4)], 1, 1, PixelFormat.A8R8G8B8) == bytes([3, 2, 1, 4])


def test_a4_bit_layout():
    assert decode_pixels(b"\x21\x43", 1, 1, PixelFormat.A4R4G4B4) == [(2, 3, 4, 1)]


def test_a8_round_trip():
    data = encode_pixels(PIXELS, 2, 2, PixelFormat.A8R8G8B8)
    assert len(data) == data_size(2, 2, PixelFormat.A8R8G8B8)
    assert decode_pixels(data, 2, 2, PixelFormat.A8R8G8B8) == PIXELS


def test_a16_encoding_matches_conversion():
    data = encode_pixels(PIXELS, 2, 2, PixelFormat.A16R16G16B16)
    decoded = decode_pixels(data, 2, 2, PixelFormat.A16R16G16B16)
    assert decoded == convert_pixels(PIXELS, PixelFormat.A8R8G8B8, PixelFormat.A16R16G16B16)
    assert convert_pixels(decoded, PixelFormat.A16R16G16B16, PixelFormat.A8R8G8B8) == PIXELS


def test_float_encoding_close_to_source():
    data = encode_pixels(PIXELS, 4, 1, PixelFormat.FLOAT)
    decoded = decode_pixels(data, 4, 1, PixelFormat.FLOAT)
    for got, want in zip(decoded, PIXELS):
        for g, w in zip(got, want):
            assert abs(g - w / 255.0) < 1e-6


def test_a4_encoding_nibbles_in_range():
    data = encode_pixels(PIXELS, 2, 2, PixelFormat.A4R4G4B4)
    decoded = decode_pixels(data, 2, 2, PixelFormat.A4R4G4B4)
    assert len(decoded) == 4
    assert decoded[3] == (0, 0, 0, 0)
    assert all(0 <= c <= 15 for p in decoded for c in p)


def test_encode_rejects_wrong_count():
    with pytest.raises(LagError):
        encode_pixels(PIXELS, 3, 3, PixelFormat.A8R8G8B8)


def test_encode_rejects_out_of_range_channel():
    with pytest.raises(LagError):
        encode_pixels([(256, 0, 0, 0)], 1, 1, PixelFormat.A8R8G8B8)


def test_decode_rejects_wrong_length():
    with pytest.raises(LagError):
        decode_pixels(b"\x00\x00\x00", 1, 1, PixelFormat.A8R8G8B8)


def test_convert_identity():
    assert convert_pixels(PIXELS, PixelFormat.A8R8G8B8, PixelFormat.A8R8G8B8) == PIXELS


def test_convert_a4_round_trip():
    nibbles = [(n, 15 - n, n // 2, 15) for n in range(16)]
    wide = convert_pixels(nibbles, PixelFormat.A4R4G4B4, PixelFormat.A8R8G8B8)
    assert all(0 <= c <= 255 for p in wide for c in p)
    assert convert_pixels(wide, PixelFormat.A8R8G8B8, PixelFormat.A4R4G4B4) == nibbles


def test_convert_to_float_and_back_ends():
    ends = [(0, 255, 0, 255)]
    floats = convert_pixels(ends, PixelFormat.A8R8G8B8, PixelFormat.FLOAT)
    assert floats[0][0] == 0.0
    assert abs(floats[0][1] - 1.0) < 1e-6
    back = convert_pixels(floats, PixelFormat.FLOAT, PixelFormat.A16R16G16B16)
    assert back[0][0] == 0


def test_write_header_bytes(tmp_path):
    path = tmp_path / "a.lag"
    write_header(path, 0)
    assert path.read_bytes() == b"LAG\x00" + struct.pack("<i", 0)


def test_append_and_read(tmp_path):
    path = tmp_path / "pack.lag"
    write_header(path)
    append_image(path, "first", PIXELS, 2, 2, PixelFormat.A8R8G8B8, 0)
    append_image(path, "second", PIXELS[:2], 1, 2, PixelFormat.A16R16G16B16, 7)
    entries = list(iter_entries(path))
    assert [e.name for e in entries] == ["first", "second"]
    assert path.stat().st_size == 8 + 32 * 2 + data_size(2, 2, PixelFormat.A8R8G8B8) + data_size(
        1, 2, PixelFormat.A16R16G16B16
    )

    second = read_image(path, "second")
    assert isinstance(second, LagEntry)
    assert (second.width, second.height, second.fmt, second.reserved) == (
        1,
        2,
        PixelFormat.A16R16G16B16,
        7,
    )
    assert convert_pixels(second.pixels, PixelFormat.A16R16G16B16, PixelFormat.A8R8G8B8) == PIXELS[:2]
    assert read_image(path, "first").pixels == PIXELS


def test_entry_header_layout(tmp_path):
    path = tmp_path / "one.lag"
    write_header(path)
    append_image(path, "abc", [(1, 2, 3, 4)], 1, 1, PixelFormat.A8R8G8B8, 0)
    raw = path.read_bytes()
    assert raw[8:24] == b"abc" + b"\x00" * 13
    assert struct.unpack("<iiii", raw[24:40]) == (1, 1, int(PixelFormat.A8R8G8B8), 0)


def test_read_missing_name(tmp_path):
    path = tmp_path / "pack.lag"
    write_header(path)
    append_image(path, "only", PIXELS, 2, 2)
    with pytest.raises(LagError):
        read_image(path, "other")


def test_bad_magic(tmp_path):
    path = tmp_path / "bad.lag"
    path.write_bytes(b"MAP\x00\x00\x00\x00\x00")
    with pytest.raises(LagError):
        list(iter_entries(path))


def test_truncated_data(tmp_path):
    path = tmp_path / "cut.lag"
    write_header(path)
    append_image(path, "img", PIXELS, 2, 2)
    path.write_bytes(path.read_bytes()[:-3])
    with pytest.raises(LagError):
        list(iter_entries(path))


def test_name_too_long(tmp_path):
    path = tmp_path / "pack.lag"
    write_header(path)
    with pytest.raises(LagError):
        append_image(path, "a" * 16, PIXELS, 2, 2)
    assert list(iter_entries(path)) == []