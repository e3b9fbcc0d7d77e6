#!/usr/bin/env python3
"""
Render Frames - Evaluate composition frames to JSON render trees

Frames are independent, so a range is evaluated on a thread pool and written
back in frame order.
"""

import argparse
import json
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

# Ensure repo root on path
ROOT = Path(__file__).parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from animatics.cli.args import build_common_parser, overrides_from_args
from animatics.core import EngineCfg, attach_log_file, get_logger, load_config, set_log_level
from animatics.engine.assets import AssetResolver
from animatics.engine.composer import CompositionRegistry, FrameResult
from animatics.engine.errors import UnknownCompositionError
from animatics.engine.particles import field_cache
from animatics.productions import build_registry

log = get_logger("render_frames")


def render_range(
    registry: CompositionRegistry,
    composition_id: str,
    start: int,
    end: Optional[int] = None,
    workers: int = 1,
    prune_inactive: bool = True,
) -> List[FrameResult]:
    """
    Render frames ``start`` through ``end`` inclusive.

    Results come back in frame order regardless of worker scheduling.
    """
    last = start if end is None else end
    if last < start:
        raise ValueError(f"--end ({last}) must not be before --frame ({start})")
    registry.get(composition_id)
    frames = range(start, last + 1)

    def render_one(frame: int) -> FrameResult:
        return registry.render(composition_id, frame, prune_inactive=prune_inactive)

    if workers <= 1 or len(frames) == 1:
        return [render_one(f) for f in frames]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(render_one, frames))


def registry_from_config(cfg: EngineCfg) -> CompositionRegistry:
    field_cache.max_size = cfg.particles.cache_size
    assets = AssetResolver(cfg.resolve(cfg.assets.root), check_exists=cfg.assets.check_exists)
    return build_registry(assets=assets, schedules_dir=cfg.resolve(cfg.schedules_dir))


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Render composition frames to JSON", parents=[build_common_parser()]
    )
    parser.add_argument("--composition", help="Composition id (see --list)")
    parser.add_argument("--frame", type=int, default=0, help="First frame to render")
    parser.add_argument("--end", type=int, default=None, help="Last frame to render (inclusive)")
    parser.add_argument("--workers", type=int, default=None, help="Render threads")
    parser.add_argument("--out", default=None, help="Write JSON here instead of stdout")
    parser.add_argument("--list", action="store_true", help="List registered compositions and exit")
    args = parser.parse_args(argv)

    cfg = load_config(args.config, overrides_from_args(args))
    set_log_level(cfg.logging.level)
    if cfg.logging.log_file:
        attach_log_file(cfg.resolve(cfg.logging.log_file))

    registry = registry_from_config(cfg)

    if args.list:
        for composition_id in registry.ids():
            c = registry.get(composition_id).config
            print(
                f"{composition_id}: {c.duration_in_frames} frames @ {c.fps}fps, "
                f"{c.width}x{c.height} ({c.duration_seconds:.1f}s)"
            )
        return 0

    if not args.composition:
        parser.error("--composition is required unless --list is given")

    try:
        results = render_range(
            registry,
            args.composition,
            args.frame,
            args.end,
            workers=cfg.render.workers,
            prune_inactive=cfg.render.prune_inactive,
        )
    except UnknownCompositionError as e:
        log.error(str(e))
        print(f"Error: {e}")
        return 1
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    payload = [r.to_dict() for r in results]
    text = json.dumps(payload, indent=2)
    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
        log.info(f"Wrote {len(results)} frame(s) of {args.composition} to {out}")
    else:
        print(text)

    failed = sum(1 for r in results if r.errors)
    if failed:
        log.warning(f"{failed} frame(s) rendered with subtree errors")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
