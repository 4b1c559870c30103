# climb_mate/cli.py
from __future__ import annotations

import argparse
import cmd
import sys
from datetime import datetime
from typing import List, Optional, TextIO

from loguru import logger

from .config import AppConfig, load_config
from .domain import NoteMarker, RouteType
from .errors import ClimbMateError
from .logging_config import normalize_level, setup_logging
from .manager import VideoManager
from .persistence import (
    add_marker_to_record,
    filter_assets,
    find_record,
    list_assets,
    load_records,
    parse_day,
    sample_records,
    save_records,
)
from .playback import PlaybackController, PlaybackMode, PlaybackTick
from .timeline import NoteTimeline, seconds_to_time_str


MODE_CHOICES = {
    "linear": PlaybackMode.LINEAR,
    "pause": PlaybackMode.PAUSE_ON_MARKER,
}


# -----------------------------
# Argument helpers
# -----------------------------

def parse_date(raw: str) -> datetime:
    """YYYY-MM-DD -> 00:00 UTC of that day."""
    try:
        return parse_day(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date: {raw}. Use YYYY-MM-DD.")


def parse_log_level(raw: str) -> str:
    try:
        return normalize_level(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Unknown log level: {raw}")


def format_tick(tick: PlaybackTick, timeline: NoteTimeline) -> str:
    line = f"{seconds_to_time_str(tick.current_second)} ({tick.current_second}s) {tick.state.value}"
    if tick.marker_id:
        text = next((m.text for m in timeline if m.id == tick.marker_id), "")
        line += f" at {tick.marker_id}"
        if text:
            line += f": {text}"
    return line


def _data_file(args: argparse.Namespace, cfg: AppConfig) -> str:
    return args.file or cfg.data_file


# -----------------------------
# Interactive playback shell
# -----------------------------

class PlaybackShell(cmd.Cmd):
    """
    Drives a PlaybackController from typed commands, one tick per line.
    """
    intro = "Playback shell. Commands: advance A B | resume ID A B | seek S | next S | prev S | quit"
    prompt = "play> "

    def __init__(self, controller: PlaybackController, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        super().__init__(stdin=stdin, stdout=stdout)
        if stdin is not None:
            self.use_rawinput = False
        self.controller = controller

    def _print(self, text: str) -> None:
        self.stdout.write(text + "\n")

    def _ints(self, parts: List[str], n: int, usage: str) -> Optional[List[int]]:
        if len(parts) != n:
            self._print(f"usage: {usage}")
            return None
        try:
            return [int(p) for p in parts]
        except ValueError:
            self._print(f"usage: {usage}")
            return None

    def _show(self, tick: PlaybackTick) -> None:
        self._print(format_tick(tick, self.controller.timeline))

    def do_advance(self, arg: str) -> None:
        """advance FROM TO"""
        nums = self._ints(arg.split(), 2, "advance FROM TO")
        if nums:
            self._show(self.controller.advance(nums[0], nums[1]))

    def do_resume(self, arg: str) -> None:
        """resume MARKER_ID FROM TO"""
        parts = arg.split()
        if not parts:
            self._print("usage: resume MARKER_ID FROM TO")
            return
        nums = self._ints(parts[1:], 2, "resume MARKER_ID FROM TO")
        if nums:
            self._show(self.controller.resume(parts[0], nums[0], nums[1]))

    def do_seek(self, arg: str) -> None:
        """seek SECOND"""
        nums = self._ints(arg.split(), 1, "seek SECOND")
        if nums:
            self._show(self.controller.seek(nums[0]))

    def do_next(self, arg: str) -> None:
        """next SECOND: first marker after SECOND"""
        nums = self._ints(arg.split(), 1, "next SECOND")
        if nums:
            m = self.controller.timeline.next_marker(after=nums[0])
            self._print(f"{m.id} @ {m.at_second}s: {m.text}" if m else "No marker.")

    def do_prev(self, arg: str) -> None:
        """prev SECOND: last marker before SECOND"""
        nums = self._ints(arg.split(), 1, "prev SECOND")
        if nums:
            m = self.controller.timeline.previous_marker(before=nums[0])
            self._print(f"{m.id} @ {m.at_second}s: {m.text}" if m else "No marker.")

    def do_quit(self, arg: str) -> bool:
        """quit"""
        return True

    def do_EOF(self, arg: str) -> bool:
        return True

    def emptyline(self) -> bool:
        return False

    def default(self, line: str) -> None:
        self._print(f"Unknown command: {line}")


# -----------------------------
# Commands
# -----------------------------

def cmd_init_sample(args: argparse.Namespace, cfg: AppConfig) -> int:
    path = _data_file(args, cfg)
    save_records(sample_records(), path)
    print(f"Sample data created at: {path}")
    return 0


def cmd_list(args: argparse.Namespace, cfg: AppConfig) -> int:
    assets = list_assets(load_records(_data_file(args, cfg)))
    if not assets:
        print("No videos found.")
        return 0
    for asset in assets:
        tag = next(iter(asset.tags), None)
        route = tag.route_type.value if tag else "unknown"
        grade = tag.grade if tag else "unknown"
        print(f"{asset.id} | {asset.container_format.value} | {route} | {grade} | {len(asset.markers)} markers")
    return 0


def cmd_filter(args: argparse.Namespace, cfg: AppConfig) -> int:
    records = load_records(_data_file(args, cfg))
    route = RouteType(args.route) if args.route else None
    if (route is None) != (args.grade is None):
        logger.warning("Both --route and --grade are needed to filter by tag; ignoring the tag")
    assets = filter_assets(
        records,
        route_type=route,
        grade=args.grade,
        start_date=args.date_from,
        end_date=args.date_to,
        profile=cfg.profile(),
    )
    for asset in assets:
        print(asset.id)
    if not assets:
        print("No matched videos.")
    return 0


def cmd_add_marker(args: argparse.Namespace, cfg: AppConfig) -> int:
    path = _data_file(args, cfg)
    records = load_records(path)
    target = find_record(records, args.id)
    existing = [m.id for m in target.markers]
    marker_id = args.marker_id or f"m{len(existing) + 1}"
    if marker_id in existing:
        raise ClimbMateError(f"Marker '{marker_id}' already exists on video '{args.id}'")

    marker = NoteMarker(id=marker_id, at_second=args.at, text=args.text, image_path=args.image)
    records = add_marker_to_record(records, args.id, marker, VideoManager(cfg.profile()))
    save_records(records, path)
    logger.info("Added marker {} to {}", marker_id, args.id)
    print(f"Added marker {marker_id} at {seconds_to_time_str(marker.at_second)} to {args.id}")
    return 0


def cmd_markers(args: argparse.Namespace, cfg: AppConfig) -> int:
    asset = find_record(load_records(_data_file(args, cfg)), args.id).to_asset()
    timeline = NoteTimeline(asset.markers)
    if not len(timeline):
        print("No markers.")
        return 0
    for m in timeline:
        suffix = f" [{m.image_path}]" if m.image_path else ""
        print(f"{seconds_to_time_str(m.at_second)} | {m.id} | {m.text}{suffix}")
    return 0


def cmd_play(args: argparse.Namespace, cfg: AppConfig) -> int:
    asset = find_record(load_records(_data_file(args, cfg)), args.id).to_asset()
    mode = MODE_CHOICES[args.mode] if args.mode else cfg.playback_mode
    controller = VideoManager(cfg.profile()).make_playback_controller(asset, mode)
    PlaybackShell(controller).cmdloop()
    return 0


def cmd_gui(args: argparse.Namespace, cfg: AppConfig) -> int:
    from .app import run_app

    if args.file:
        cfg.data_file = args.file
    return run_app(cfg)


# -----------------------------
# Parser / entry point
# -----------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="climb-mate", description="Climbing video catalog")
    parser.add_argument("--config", default=None, help="Path to config.json")
    parser.add_argument("--log-level", default=None, type=parse_log_level, help="Override the configured log level")

    data = argparse.ArgumentParser(add_help=False)
    data.add_argument("--file", default=None, help="Video store (JSON); defaults to the configured data file")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-sample", parents=[data], help="Write sample records")
    p.set_defaults(handler=cmd_init_sample)

    p = sub.add_parser("list", parents=[data], help="List all videos")
    p.set_defaults(handler=cmd_list)

    p = sub.add_parser("filter", parents=[data], help="Filter by route/grade and date range")
    p.add_argument("--route", choices=[r.value for r in RouteType])
    p.add_argument("--grade")
    p.add_argument("--from", dest="date_from", type=parse_date, metavar="YYYY-MM-DD")
    p.add_argument("--to", dest="date_to", type=parse_date, metavar="YYYY-MM-DD")
    p.set_defaults(handler=cmd_filter)

    p = sub.add_parser("add-marker", parents=[data], help="Append a marker to a video")
    p.add_argument("--id", required=True, help="Video id")
    p.add_argument("--at", required=True, type=int, help="Second of the marker")
    p.add_argument("--text", required=True)
    p.add_argument("--image", default=None, help="Optional image path")
    p.add_argument("--marker-id", default=None)
    p.set_defaults(handler=cmd_add_marker)

    p = sub.add_parser("markers", parents=[data], help="Show a video's markers in time order")
    p.add_argument("--id", required=True)
    p.set_defaults(handler=cmd_markers)

    p = sub.add_parser("play", parents=[data], help="Interactive marker playback")
    p.add_argument("--id", required=True)
    p.add_argument("--mode", choices=sorted(MODE_CHOICES))
    p.set_defaults(handler=cmd_play)

    p = sub.add_parser("gui", parents=[data], help="Open the desktop window")
    p.set_defaults(handler=cmd_gui)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = load_config(args.config)
    setup_logging(level=args.log_level or cfg.log_level, file_path=cfg.log_file)

    try:
        return int(args.handler(args, cfg) or 0)
    except ClimbMateError as e:
        logger.debug("Command {} failed: {!r}", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
