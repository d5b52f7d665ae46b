# fsnav

fsnav scans a directory and models it as a 3D scene: every directory
becomes a platform, its files become small blocks laid out in a grid on top
of it, and subdirectories are placed further back, joined to their parent
by links. Nodes can be picked with a ray, a file's details (size,
permissions, owner, group and times) can be produced as text lines, and a
`Navigator` keeps the camera and selection state that keyboard and mouse
input drive.

The package also carries a small image I/O library for PPM, Targa, PNG,
JPEG and Radiance RGBE files, and a stereo camera helper that computes
per-eye view offsets and frusta.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
fsnav [-s] [directory]
```

The command scans `directory` (the current directory by default), lays the
tree out and prints a summary such as:

```
.: 12 directories, 87 files
```

- Only one directory may be given; a second one is an error.
- `-s` toggles the stereo option; it is accepted and parsed but does not
  change the summary.
- Any other option, or a directory that cannot be read, prints an error and
  the command exits with status 1.

## Library use

Scan and lay out a tree:

```python
from fsnav.fstree import Dir, build_tree

root = Dir()
build_tree(root, "/some/directory")   # raises OSError if it cannot be read
root.layout()
```

Layout sizes are set with `set_layout_param(LayoutParameter.<NAME>, value)`
(`FILE_SIZE`, `FILE_SPACING`, `FILE_HEIGHT`, `DIR_SIZE`, `DIR_SPACING`,
`DIR_HEIGHT`, `DIR_DIST`); `fsnav.app.main` sets the defaults it uses before
laying out.

`Dir.find_intersection(ray)` returns the nearest node hit by a `Ray` and its
ray parameter, `Dir.pick(ray)` selects that node and reports whether the
selection changed, and `get_selection()` returns the current selection.
`fsnav.colorman.get_color(node)` gives the colour of a node's box.

Show a file's details:

```python
from fsnav.filestats import file_stats_lines, format_size, mode_str

print(mode_str(0o754))   # rwxr-xr--
print(format_size(2048)) # 2.0 kb
```

`file_stats_lines(file)` returns the name followed by the size, permission,
user, group and access, modification and change time lines.

Command line parsing and input state live in `fsnav.app`: `parse_args`
returns an `Options`, `find_data_file` looks a file up in the data
directories, and `Navigator` handles `key_down`, `key_up`, `mouse`, `motion`
and `double_click`, each returning whether the view needs redrawing, and
`camera_position(msec)` for the camera's eased move to a picked node.

## Images

The format is detected from a file's contents when loading, and taken from
the suffix (`.png`, `.jpg`, `.tga`, `.ppm`, `.rgbe`) when saving with
`ImageFormat.AUTO`:

```python
from fsnav.image.imageio import load_image, save_image
from fsnav.image.pixels import ImageFormat

image = load_image("picture.tga")
save_image("picture.ppm", image, ImageFormat.AUTO)
```

Images are `Image` objects holding packed 32-bit pixels, or RGBA floats when
the `FLOAT` option is set. Options (`ALPHA`, `INVERT`, `TEXT`, `FLOAT`) are
set with `set_image_option(ImageOption.<NAME>, value)`. Failures raise
`ImageError`. JPEG and RGBE files can be loaded but not saved; saving them
raises `ImageError`. The RGBE module also exposes its header reader and
writer and its run-length pixel codec.

## What it does not do

fsnav does not open a window or draw anything: there is no interactive 3D
view, no text or font rendering and no on-screen file information panel.
The command only scans, lays out and summarises a tree; the scene, the
picking, the stats text and the input handling are available as a library
for a front end to use.