"""CLI entry point for flourish."""

import argparse
import json
import logging
import random
import sys
from pathlib import Path

from flourish.config import Config, load_config
from flourish.driver import FrameDriver, ResizeEvent, render_at
from flourish.export import export_frames
from flourish.layout import describe_layout
from flourish.page import PageGeometry, default_page, load_page
from flourish.session import ANIMATIONS, make_animation

def _parse_resize(value: str) -> tuple[float, float, float]:
    """Parse ``MS:WxH`` into (at_ms, width, height)."""
    try:
        at, size = value.split(":")
        w, h = size.lower().split("x")
        return float(at), float(w), float(h)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected MS:WxH, got {value!r}") from None


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("kind", choices=sorted(ANIMATIONS), help="Which network to draw")
    p.add_argument("--page", type=Path, default=None, help="YAML page geometry (default: generated)")
    p.add_argument("--width", type=float, default=1200, help="Viewport width in CSS pixels")
    p.add_argument("--height", type=float, default=800, help="Viewport height in CSS pixels")
    p.add_argument("--dpr", type=float, default=1.0, help="Device pixel ratio")
    p.add_argument("--seed", type=int, default=None, help="Seed for reproducible layouts")


def main() -> None:
    parser = argparse.ArgumentParser(description="Decorative network animations")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command")

    # render command
    render_parser = sub.add_parser("render", help="Render the whole animation")
    _add_common(render_parser)
    render_parser.add_argument("--fps", type=float, default=None, help="Frames per second")
    render_parser.add_argument(
        "--resize-at", type=_parse_resize, action="append", default=[], metavar="MS:WxH",
        help="Simulate a viewport resize at MS milliseconds (repeatable)",
    )
    render_parser.add_argument(
        "-o", "--out", type=Path, default=None,
        help="Output .gif file or directory for PNG frames",
    )

    # frame command
    frame_parser = sub.add_parser("frame", help="Render a single still frame")
    _add_common(frame_parser)
    frame_parser.add_argument("--at", type=float, required=True, help="Milliseconds into the animation")
    frame_parser.add_argument("-o", "--out", type=Path, default=None, help="Output PNG path")

    # layout command
    layout_parser = sub.add_parser("layout", help="Print a generated layout")
    _add_common(layout_parser)
    layout_parser.add_argument("--json", action="store_true", help="Dump the full layout as JSON")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return

    try:
        config = load_config(args.config)
        if args.page:
            page = load_page(args.page)
        else:
            page = default_page(args.width, args.height, args.dpr, config)

        rng = random.Random(args.seed)
        animation = make_animation(args.kind, config, rng=rng)

        if args.command == "render":
            fps = args.fps or config.render.fps
            out = args.out or config.resolved_output_dir / f"{args.kind}-network.gif"
            resizes = [
                ResizeEvent(at, _resized(page, w, h, config, generated=args.page is None))
                for at, w, h in args.resize_at
            ]
            driver = FrameDriver(animation, fps=fps)
            frames = (img for _, img in driver.run(page, resizes))
            count = export_frames(frames, out, fps, config.render.gif_background)
            if count == 0:
                print(f"Page has no elements for the {args.kind} network; nothing rendered.")
            else:
                print(f"Output: {out} ({count} frames)")

        elif args.command == "frame":
            image = render_at(animation, page, args.at)
            if image is None:
                print(f"Page has no elements for the {args.kind} network; nothing rendered.")
                return
            out = args.out or config.resolved_output_dir / f"{args.kind}-{int(args.at)}ms.png"
            out.parent.mkdir(parents=True, exist_ok=True)
            image.save(out)
            print(f"Output: {out}")

        elif args.command == "layout":
            session = animation.setup(page)
            if session is None:
                print(f"Page has no elements for the {args.kind} network.")
                return
            data = describe_layout(session.layout)
            if args.json:
                print(json.dumps(data, indent=2))
            else:
                edge_keys = [k for k in ("lines12", "lines23", "edges") if k in data]
                print(f"{args.kind} network {data['width']:.0f}x{data['height']:.0f}")
                print(f"  nodes: {len(data['nodes'])}")
                for k in edge_keys:
                    print(f"  {k}: {len(data[k])}")

    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _resized(
    page: PageGeometry, width: float, height: float, config: Config, generated: bool
) -> PageGeometry:
    """Page geometry after a viewport resize.

    Generated pages are laid out again; loaded pages keep their element boxes
    and only take the new viewport size.
    """
    if generated:
        return default_page(width, height, page.device_pixel_ratio, config)
    return page.model_copy(update={"width": width, "height": height})


if __name__ == "__main__":
    main()
