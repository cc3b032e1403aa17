# broomkit

Tools for preparing and handling the assets of a small 2D shooter:

- **LAG image packs** (`broomkit.lag`): a container of named images, each
  stored in one of four pixel formats (16-bit A4R4G4B4, 32-bit A8R8G8B8,
  64-bit A16R16G16B16 and 128-bit float), with the ordered dithering used
  when reducing to 16 bits.
- **Image editing** (`broomkit.graphic`): load an image, take its alpha from
  a mask image, apply or clear a colour key, flip, invert, and blend the
  image over a checkerboard for previewing.
- **Map event files** (`broomkit.mapconv`): turn comma-separated event text
  into the binary `.map` format.
- **Wave packs** (`broomkit.wavepack`): gather the PCM `.wav` files of a
  directory into one pack file.
- **Game configuration** (`broomkit.config`): read and write the three-flag
  `config.dat` file.
- **HUD logic** (`broomkit.hud`): the score, gold, rate and force counters
  of the in-game status panel, with their bonuses and bomb rules.

## Installation

```
pip install .
```

Pillow is the only runtime dependency. For the tests:

```
pip install ".[test]"
pytest
```

## Command line

Four commands are installed.

### broomkit-lagutil

```
broomkit-lagutil pack DIRECTORY OUTPUT [--format FMT]
broomkit-lagutil add IMAGE OUTPUT [--name NAME] [--append] [--format FMT] [edits]
broomkit-lagutil bmp32 IMAGE OUTPUT [edits]
```

- `pack` writes a new LAG file holding every `*.bmp` of a directory, in
  file-name order. Files named `*_a.bmp` are not packed themselves; they
  are used as the alpha mask of the image with the same name. It prints how
  many images it found.
- `add` stores one image (with its `_a` mask, if present). Without
  `--append` the output file is created anew; `--name` overrides the entry
  name taken from the file name.
- `bmp32` saves an image, with its alpha, as an uncompressed 32-bit BMP.

`FMT` is one of `a4r4g4b4`, `a8r8g8b8` (the default), `a16r16g16b16` or
`float`. The edits are `--color-key R G B`, `--flip-h`, `--flip-v` and
`--invert`, applied in that order.

### broomkit-mapconv

```
broomkit-mapconv stage1.txt [more.txt ...] [-o OUTPUT_DIR]
```

Converts each event text file into `<name>.map` in the output directory
(the current directory by default), printing every event it reads.

### broomkit-wavepack

```
broomkit-wavepack OUTPUT [DIRECTORY]
```

Packs the `.wav` files of a directory (the current one by default) into
`OUTPUT`, printing each sound's format and data size. Compressed or broken
wave files are reported and left out.

### broomkit-config

```
broomkit-config [--window] [--full-color] [--full-color-texture] [-o OUTPUT]
```

Writes a configuration file (`config.dat` by default); options not given
are switched off.

## Library use

Writing and reading a LAG pack:

```python
from broomkit import lag

pixels = [(255, 0, 0, 255)] * (4 * 4)
lag.write_header("sprites.lag", 0)
lag.append_image("sprites.lag", "player", pixels, 4, 4, lag.PixelFormat.A8R8G8B8, 0)

for entry in lag.iter_entries("sprites.lag"):
    print(entry.name, entry.width, entry.height, entry.fmt)

image = lag.read_image("sprites.lag", "player")
print(image.pixels[0])    # (255, 0, 0, 255)
```

Pixels are `(r, g, b, a)` tuples in row-major order. Entry names must fit
in 15 bytes. `lag.data_size`, `lag.encode_pixels`, `lag.decode_pixels` and
`lag.convert_pixels` give sizes and conversions between formats, and
`lag.dither4` / `lag.dither5` the dither values. Problems with a pack raise
`lag.LagError`.

Preparing an image before packing:

```python
from broomkit.lagutil import load_with_alpha, save_bitmap32

graphic = load_with_alpha("player.bmp")   # also reads player_a.bmp if present
graphic.set_color_key(0, 0, 0)
graphic.flip_horizontal()
save_bitmap32("player32.bmp", graphic)
```

`Graphic.load_bmp` reads any image Pillow can open and makes every pixel
opaque; `Graphic` also offers `apply_alpha_mask`, `get_color`,
`restore_color_key`, `flip_vertical`, `invert` and `preview`. Errors raise
`graphic.GraphicError`. `lagutil.batch_process(directory, output, fmt)` is
the function behind `broomkit-lagutil pack`.

Names follow fixed rules: `broomkit.naming.data_name` lower-cases the file
name and drops its directory and extension, `broomkit.naming.alpha_name`
gives the path of the companion mask and `broomkit.naming.is_alpha_name`
recognises one.

Map events:

```python
from broomkit.mapconv import parse_line, parse_number

parse_number("0x1F")      # 31
event = parse_line("120, 3, 320, -16, 0, 0, 50")
event.to_bytes()          # the 16-byte record
```

Wave packs: `wavepack.read_wave` returns a file's `WaveFormat` and sample
data, `wavepack.write_entry` writes one entry, and
`wavepack.pack_directory` does the whole job. Configuration:
`Config.load()`, `Config.save()`, `Config.to_bytes()` and
`Config.from_bytes()`.

The HUD counters:

```python
from broomkit.hud import Hud

hud = Hud()
hud.set_add_rate(10)
hud.add_score(5000)
bonuses = hud.update()    # advances one frame, returns any Bonus values
hud.score_text            # the shown score, ten digits
```

## What it does not do

- There is no graphical editor or viewer: images are edited through the
  `Graphic` class or the `broomkit-lagutil` options, and `preview` only
  returns the blended pixels.
- `broomkit.hud` holds the panel's numbers and rules only; it draws
  nothing, and there is no game to run it in.
- Sounds are packed but not played.