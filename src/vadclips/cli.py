#!/usr/bin/env python3
"""
Replay an audio file through the session clipper and list the clips it
would publish.
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from vadclips.config import ClipperConfig
from vadclips.detector.file_detector import FileBurstDetector
from vadclips.errors import DetectorInitError
from vadclips.recorder import SessionRecorder
from vadclips.session.clip_events import ClipPublishedEvent
from vadclips.utils.loggers import setup_logging
from vadclips.utils.top_error import TopErrorHandler, get_error_handler

logger = logging.getLogger("CLI")


class ClipPrinter:

    def __init__(self, out=None):
        self.out = out or sys.stdout
        self.count = 0

    async def on_clip_event(self, event):
        if isinstance(event, ClipPublishedEvent):
            clip = event.clip
            self.count += 1
            print(f"clip {clip.sequence}: {clip.duration_seconds:.3f}s "
                  f"{clip.sample_count} samples {clip.handle}", file=self.out)


async def main(path: Path, config: ClipperConfig, simulate_timing: bool, out=None) -> int:
    detector = FileBurstDetector(path,
                                 burst_seconds=config.burst_seconds,
                                 gap_seconds=config.gap_seconds,
                                 simulate_timing=simulate_timing)
    printer = ClipPrinter(out)
    async with SessionRecorder(detector, config) as recorder:
        handler = get_error_handler()
        if handler is not None and handler.clean_shutdown is None:
            handler.clean_shutdown = recorder
        recorder.add_event_listener(printer)
        await recorder.init()
        await recorder.start()
        await detector.finished.wait()
        # let a final silence period close the last session on its own
        if simulate_timing:
            await asyncio.sleep(config.silence_timeout)
        await recorder.stop()
    logger.info("Published %d clips", printer.count)
    return printer.count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Group speech bursts from an audio file into WAV clips')
    parser.add_argument('path', type=str, help="16 kHz audio file to replay")
    parser.add_argument('-c', '--config', type=str, default=None, help="YAML config file")
    parser.add_argument('--silence-timeout', type=float, default=None,
                        help="Seconds of silence that close a session")
    parser.add_argument('--burst-seconds', type=float, default=None, help="Length of each replayed burst")
    parser.add_argument('--gap-seconds', type=float, default=None, help="Pause between replayed bursts")
    parser.add_argument('--no-timing', action='store_true',
                        help="Deliver bursts back to back instead of in real time")
    parser.add_argument('-v', '--verbose', action='store_true', help="Log session activity")
    return parser


def run(argv=None, out=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    file_path = Path(args.path)
    if not file_path.exists():
        parser.error(f"Sound file {file_path} does not exist")
    try:
        config = ClipperConfig.from_file(Path(args.config)) if args.config else ClipperConfig.defaults()
    except (FileNotFoundError, ValueError) as e:
        parser.error(str(e))
    if args.silence_timeout is not None:
        config.silence_timeout = args.silence_timeout
    if args.burst_seconds is not None:
        config.burst_seconds = args.burst_seconds
    if args.gap_seconds is not None:
        config.gap_seconds = args.gap_seconds
    try:
        config.validate()
    except ValueError as e:
        parser.error(str(e))

    info_loggers = list(config.info_loggers)
    if args.verbose:
        info_loggers += ["SessionAccumulator", "ClipPublisher", "SessionRecorder", "CLI"]
    setup_logging(default_level=config.log_level.upper(),
                  info_loggers=info_loggers,
                  debug_loggers=config.debug_loggers,
                  more_loggers=[logger])

    handler = TopErrorHandler(logger=logger)
    try:
        handler.run(main, file_path, config, not args.no_timing, out)
    except DetectorInitError as e:
        logger.error("Cannot replay %s: %s", file_path, e)
        return 1
    return 1 if handler.error_dicts else 0


if __name__ == "__main__":
    sys.exit(run())
