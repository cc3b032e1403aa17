import io

import pytest

from broomkit.mapconv import (
    MAP_HEADER,
    EventData,
    convert,
    convert_file,
    main,
    parse_line,
    parse_number,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0x1F", 31),
        ("0XfF", 255),
        ("-12", -12),
        ("42abc", 42),
        ("abc", 0),
        ("", 0),
        ("7", 7),
    ],
)
def test_parse_number(text, expected):
    assert parse_number(text) == expected


def test_parse_line_basic():
    event = parse_line("10, 2, 320, -16, 0, 0, 100\n")
    assert event == EventData(10, 2, 320, -16, 0, 0, 100)


def test_parse_line_drops_hex_letters():
    event = parse_line("0x1F,0,0,0,0,0,0")
    assert event.time == 1


@pytest.mark.parametrize("line", ["// comment\n", " /x\n", "\n", "   \n"])
def test_parse_line_skips_comments_and_blanks(line):
    assert parse_line(line) is None


def test_parse_line_too_few_fields():
    with pytest.raises(ValueError):
        parse_line("1,2,3\n")


def test_parse_line_collapses_empty_fields():
    assert parse_line("1,,2,3,4,5,6,7") == EventData(1, 2, 3, 4, 5, 6, 7)


def test_parse_line_wraps_short_fields():
    event = parse_line("0,65535,0,0,0,0,0")
    assert event.type == -1


def test_event_round_trip():
    event = EventData(5, -3, 100, 200, 1, 2, 123456)
    data = event.to_bytes()
    assert len(data) == 16
    assert EventData.from_bytes(data) == event


def test_event_from_bytes_wrong_size():
    with pytest.raises(ValueError):
        EventData.from_bytes(b"\0" * 15)


def test_convert_writes_records():
    source = ["// header\n", "1,2,3,4,5,6,7\n", "8,9,10,11,12,13,14\n"]
    out = io.BytesIO()
    events = convert(source, out)
    assert len(events) == 2
    data = out.getvalue()
    assert len(data) == 32
    assert EventData.from_bytes(data[16:]) == events[1]


def test_convert_file(tmp_path):
    src = tmp_path / "stage1.txt"
    src.write_text("// time,type,x,y,t0,t1,life\n0,1,2,3,4,5,6\n")
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    output, events = convert_file(src, out_dir)
    assert output == out_dir / "stage1.map"
    data = output.read_bytes()
    assert data[:4] == MAP_HEADER
    assert EventData.from_bytes(data[4:]) == events[0]


def test_main(tmp_path, capsys):
    src = tmp_path / "stage2.csv"
    src.write_text("1,2,3,4,5,6,7\n")
    assert main([str(src), "-o", str(tmp_path)]) == 0
    assert (tmp_path / "stage2.map").exists()
    out = capsys.readouterr().out
    assert "Output =" in out
    assert "1, 2, 3, 4, 5, 6, 7" in out


def test_main_missing_file(tmp_path):
    assert main([str(tmp_path / "missing.txt"), "-o", str(tmp_path)]) == 1