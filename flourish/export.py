"""Write rendered frames to disk as an animated GIF or a PNG sequence."""

import logging
from pathlib import Path
from typing import Iterable

from PIL import Image

logger = logging.getLogger(__name__)


def flatten(frame: Image.Image, size: tuple[int, int], background: tuple[int, int, int]) -> Image.Image:
    """Composite an RGBA frame onto an opaque background of a fixed size."""
    out = Image.new("RGB", size, background)
    out.paste(frame, (0, 0), frame)
    return out


def save_gif(
    frames: Iterable[Image.Image],
    path: Path,
    fps: float,
    background: tuple[int, int, int] = (15, 23, 42),
) -> int:
    """Save frames as a GIF that plays once. Returns the frame count.

    All frames take the size of the first; frames painted after a resize are
    cropped or padded to fit.
    """
    palette_frames: list[Image.Image] = []
    size: tuple[int, int] | None = None
    for frame in frames:
        if size is None:
            size = frame.size
        palette_frames.append(
            flatten(frame, size, background).convert("P", palette=Image.Palette.ADAPTIVE)
        )

    if not palette_frames:
        logger.info("No frames to write to %s", path)
        return 0

    path.parent.mkdir(parents=True, exist_ok=True)
    first, *rest = palette_frames
    first.save(
        path,
        save_all=True,
        append_images=rest,
        duration=max(1, round(1000 / fps)),
        optimize=False,
    )
    logger.info("Wrote %d frames to %s", len(palette_frames), path)
    return len(palette_frames)


def save_png_sequence(frames: Iterable[Image.Image], directory: Path, prefix: str = "frame") -> int:
    """Save frames as numbered RGBA PNGs. Returns the frame count."""
    directory.mkdir(parents=True, exist_ok=True)
    count = 0
    for count, frame in enumerate(frames, start=1):
        frame.save(directory / f"{prefix}_{count:05d}.png")
    logger.info("Wrote %d frames to %s", count, directory)
    return count


def export_frames(
    frames: Iterable[Image.Image],
    path: Path,
    fps: float,
    background: tuple[int, int, int] = (15, 23, 42),
) -> int:
    """Dispatch on the output path: ``.gif`` file, or a directory of PNGs."""
    if path.suffix.lower() == ".gif":
        return save_gif(frames, path, fps, background)
    if path.suffix:
        raise ValueError(f"Unsupported output {path.name!r}: use a .gif file or a directory")
    return save_png_sequence(frames, path)
