# kaiki

Building blocks for visual regression testing. kaiki compares screenshots
pixel by pixel with a pixelmatch-compatible algorithm, groups the differing
pixels into regions, and reads and validates reg-suit style `regconfig.json`
files.

## Comparing images

`kaiki.diff.compare` works on encoded image bytes (anything Pillow can open,
such as PNG, JPEG, TIFF, BMP or GIF) or on decoded RGBA data held in
`kaiki.diff.render.ImageData`.

```python
from pathlib import Path

from kaiki.diff.compare import CompareOptions, compare_image_files

actual = Path("actual/button.png").read_bytes()
expected = Path("expected/button.png").read_bytes()

result = compare_image_files(actual, expected, CompareOptions())
print(result.diff_count, "of", result.total_pixels, "pixels differ")
```

When both inputs are byte-for-byte identical the comparison takes a fast path:
`images_are_same` is true and `diff_image` and `diff_mask` are `None`.
Otherwise `compare_images` runs and the result carries a rendered diff image
(differing pixels in the diff colour, anti-aliased pixels in the AA colour,
matching pixels as greyscale faded toward white) and a per-pixel mask of the
differing pixels. Bytes that cannot be decoded raise `DiffError`;
`decode_image` is available on its own.

Images of different sizes are padded with transparent black to the larger
width and height before comparison.

`CompareOptions` fields:

- `matching_threshold` (default `0.0`): YIQ threshold; 0.0 is an exact match.
- `enable_antialias` (default `False`): when false, anti-aliased pixels are
  detected, drawn in `aa_color` and not counted as differences.
- `diff_color` (default `(255, 119, 119)`), `diff_color_alt` (default `None`,
  used where the first image is brighter), `aa_color` (default `(255, 255, 0)`).
- `alpha` (default `0.1`): blend factor for matching pixels.

The lower-level pieces live in `kaiki.diff.pixel` (`color_delta`),
`kaiki.diff.antialias` (`is_antialiased`, `has_many_siblings`) and
`kaiki.diff.render` (`expand_image` and the pixel painters).

### Finding changed regions

```python
from kaiki.diff.regions import detect_diff_regions

if result.diff_mask is not None:
    boxes = detect_diff_regions(result.width, result.height, result.diff_mask, min_area=4)
    for box in boxes:
        print(box.x, box.y, box.width, box.height)
```

Pixels are joined with 8-connectivity; components smaller than `min_area`
are dropped, and the `BoundingBox` values come back sorted top to bottom,
then left to right. A mask of the wrong length raises `ValueError`.

## Configuration

```python
from kaiki.config import (
    effective_concurrency,
    effective_matching_threshold,
    effective_threshold_rate,
    load_config,
)

config = load_config("regconfig.json")
print(config.core.actual_dir, config.core.working_dir)
print(effective_matching_threshold(config.core))  # 0.0 unless set
print(effective_threshold_rate(config.core))      # thresholdRate, else legacy threshold
print(effective_concurrency(config.core))         # 4 unless set
```

`actualDir` defaults to `directory_contains_actual_images` and `workingDir`
to `.reg`. Environment variables are expanded in the file before it is
parsed: `${VAR}` and `$VAR` are replaced by their values, and `$$` stands for
a literal `$`. Unreadable files, invalid JSON, wrongly typed fields and unset
variables all raise `ConfigError`. The expansion is also available on its own
as `kaiki.envexpand.expand_env_vars`, which raises `KeyError` for an unset
variable; `parse_config` parses text without expansion.

Plugin sections can be read into typed settings with
`S3PluginConfig.from_dict`, `GcsPluginConfig.from_dict`,
`GitHubNotifyConfig.from_dict`, `SlackNotifyConfig.from_dict` and
`SimpleKeygenConfig.from_dict`; a missing required field raises `ConfigError`.

### Validating a configuration

```python
from kaiki.prepare import ValidationError, run_prepare

try:
    run_prepare("regconfig.json")
except ValidationError as exc:
    print(exc)
```

`run_prepare` loads and checks the file and creates the working directory.
The checks, also available as `validate_config`, require non-empty
`actualDir` and `workingDir`, keep `matchingThreshold`, the threshold rate and
`alpha` within 0.0 to 1.0, verify the settings of known plugins, and allow at
most one key generator plugin and one storage plugin. Unknown plugins are
accepted with a logged warning.

### Writing a new configuration

`kaiki.init_wizard.run_init_wizard(prompt=None)` asks a series of questions
and writes `regconfig.json` in the current directory, asking first before it
overwrites an existing file. The prompt is any object with `confirm`, `text`,
`select` and `multi_select` methods; by default `ConsolePrompt` reads answers
from standard input. `build_config_json` turns an `InitAnswers` value into
the configuration document without any interaction.

## Helpers

- `kaiki.image_finder.find_images(directory)` returns the sorted relative
  paths (with `/` separators) of all image files below a directory, or an
  empty list if the directory does not exist.
- `kaiki.ci.detect_pr_number()` finds the pull request number from
  `REG_SUIT_PR_NUMBER`, the GitHub Actions event file named by
  `GITHUB_EVENT_PATH`, or a `refs/pull/<number>/...` value in `GITHUB_REF`.

## What kaiki does not do

kaiki is a library, not a complete tool. It has no command-line program and
does not run a whole comparison pipeline over directories. It does not
generate keys from git history, download or upload images to S3 or GCS, write
JSON or HTML reports, or send GitHub or Slack notifications; the plugin
settings are only read and validated.