"""
PPG Core - Command Line Entry Point
Runs a recording through the full processing chain:
  1. Load samples (CSV with timestamp,value columns, or a synthetic demo)
  2. Filter the stream
  3. Estimate heart rate and HRV from the filtered signal
  4. Score overlapping windows with the heuristic BP scorer

Usage:
    python run.py --demo
    python run.py --csv recording.csv --sample-rate 30
    python run.py --csv recording.csv --sample-rate 100 --notch 50 --window 500 --stride 250
"""

import argparse
import csv
import logging
import sys
from typing import List

import numpy as np

from ppg_core import (
    ConfigurationError,
    DSPConfig,
    Sample,
    StreamFilter,
    WindowedEstimationPipeline,
    compute_hrv,
    estimate_bpm,
    heuristic_bp_scorer,
    make_samples,
)
from ppg_core.config import BANDPASS_HIGH, BANDPASS_LOW, CAMERA_SAMPLE_RATE, SMOOTHING_WINDOW

logger = logging.getLogger('ppg_run')


def load_csv(path: str) -> List[Sample]:
    """Read timestamp,value rows into Samples, skipping malformed rows."""
    samples = []
    with open(path, newline='') as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            try:
                samples.append(Sample(timestamp=int(float(row['timestamp'])), value=float(row['value'])))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping row {line_no}: {e}")
    logger.info(f"Loaded {len(samples)} samples from {path}")
    return samples


def synthetic_recording(sample_rate: float, duration: float = 30.0, heart_rate_hz: float = 1.2) -> List[Sample]:
    """A DC-offset sine with mild noise, stand-in for a camera recording."""
    rng = np.random.default_rng(0)
    t = np.arange(int(sample_rate * duration)) / sample_rate
    values = 0.5 + 0.1 * np.sin(2 * np.pi * heart_rate_hz * t) + rng.normal(0, 0.005, len(t))
    return make_samples(values, sample_rate)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='PPG filtering, heart rate and windowed estimation')
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--csv', help='CSV file with timestamp,value columns')
    source.add_argument('--demo', action='store_true', help='Use a 30 s synthetic recording (72 bpm)')
    parser.add_argument('--sample-rate', type=float, default=CAMERA_SAMPLE_RATE,
                        help=f'Sampling rate in Hz (default: {CAMERA_SAMPLE_RATE})')
    parser.add_argument('--low', type=float, default=BANDPASS_LOW,
                        help=f'Bandpass low edge in Hz (default: {BANDPASS_LOW})')
    parser.add_argument('--high', type=float, default=BANDPASS_HIGH,
                        help=f'Bandpass high edge in Hz (default: {BANDPASS_HIGH})')
    parser.add_argument('--smoothing', type=int, default=SMOOTHING_WINDOW,
                        help=f'Moving-average window in samples (default: {SMOOTHING_WINDOW})')
    parser.add_argument('--notch', type=float, default=None, help='Powerline notch frequency in Hz')
    parser.add_argument('--window', type=int, default=300, help='Estimation window in samples (default: 300)')
    parser.add_argument('--stride', type=int, default=150, help='Estimation stride in samples (default: 150)')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    )

    config = DSPConfig(
        bandpass_low=args.low,
        bandpass_high=args.high,
        notch_frequency=args.notch,
        smoothing_window=args.smoothing,
    )

    try:
        stream_filter = StreamFilter(args.sample_rate, config)
        pipeline = WindowedEstimationPipeline(
            heuristic_bp_scorer,
            window_size=args.window,
            stride=args.stride,
        )
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    try:
        samples = synthetic_recording(args.sample_rate) if args.demo else load_csv(args.csv)
    except OSError as e:
        logger.error(f"Could not read recording: {e}")
        return 1

    if not samples:
        logger.error("No samples to process")
        return 1

    filtered = stream_filter.process_many(s.value for s in samples)

    bpm = estimate_bpm(filtered, args.sample_rate)
    hrv = compute_hrv(filtered, args.sample_rate)
    print(f"Samples     : {len(samples)} ({len(samples) / args.sample_rate:.1f} s)")
    print(f"Heart rate  : {bpm if bpm else 'insufficient signal'}{' bpm' if bpm else ''}")
    if hrv:
        print(f"HRV         : SDNN={hrv.sdnn_ms:.1f} ms, RMSSD={hrv.rmssd_ms:.1f} ms ({hrv.beat_count} beats)")
    else:
        print("HRV         : insufficient signal")

    result = pipeline.run(samples)
    print(f"Windows     : {len(result)} scored, {len(result.failures)} failed")
    for window in result:
        bp = window.estimate
        print(f"  #{window.window_index:<3d} t={window.end_timestamp} ms  {bp.systolic}/{bp.diastolic} mmHg")

    return 0


if __name__ == '__main__':
    sys.exit(main())
