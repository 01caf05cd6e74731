"""
# robotframework-pagediff
----
Page-by-page visual comparison of two document versions.

Both documents are rendered to page images, pages with the same file name are
paired, and a difference image is created for every pair. The run stops at the
first pair that the differencer reports as a hard failure.

# Installation instructions

`pip install --upgrade robotframework-pagediff`

ImageMagick has to be installed and on the `PATH` for the default renderer and
differencer. Rendering with `--renderer pymupdf` and comparing with
`--differ ssim` works without it.

# Command line

```
pagediff reference.pdf candidate.pdf out
```

Creates `out/left`, `out/right` and `out/diff`. If those already contain files
you are asked before they are cleared. If the page counts differ you are asked
whether to continue with the pages found on both sides. Use `--yes` to answer
every question with yes.

Exit status is `0` on success or when you decline to continue, `1` on any error
or when a page pair fails.

# Robot Framework

```RobotFramework
*** Settings ***
Library    PageDiff.DocumentPagesTest

*** Test Cases ***
Compare two PDF documents page by page
    Compare Document Pages    Reference.pdf    Candidate.pdf
```

# Configuration

Settings are read from a `.env` file in the working directory and from the
environment:

| Variable | Default |
| --- | --- |
| `PAGEDIFF_DENSITY` | `150` |
| `PAGEDIFF_FUZZ` | `1000` |
| `PAGEDIFF_RENDERER` | `magick` |
| `PAGEDIFF_DIFFER` | `magick` |
| `PAGEDIFF_MAGICK` | first `magick` or `convert` on the `PATH` |
| `PAGEDIFF_HARD_FAILURE_CODES` | `2` |
| `PAGEDIFF_MATCHED_CODES` | `0` |
| `PAGEDIFF_SSIM_THRESHOLD` | `0.0` (the `ssim` differencer only) |
"""
from importlib import metadata

try:
    __version__ = metadata.version("robotframework-pagediff")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0"
