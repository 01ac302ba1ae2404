"""CLI: extract MFCCs from a WAV file and build its self-similarity matrix."""

import argparse
import logging
import sys
from pathlib import Path

from mfcc_similarity.audio import MfccConfig, iter_wav_blocks
from mfcc_similarity.errors import MfccError
from mfcc_similarity.pipeline import Pipeline
from mfcc_similarity.postprocess import format_features, format_similarity
from mfcc_similarity.similarity import build_similarity_matrix

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    defaults = MfccConfig()
    parser = argparse.ArgumentParser(
        description="MFCC extraction and cosine self-similarity for mono 16-bit PCM WAV"
    )
    parser.add_argument("wav", type=Path, help="Input WAV file (mono, 16-bit PCM)")
    parser.add_argument(
        "--sample-rate",
        type=int,
        default=defaults.sample_rate,
        help=f"Expected sample rate in Hz (default: {defaults.sample_rate})",
    )
    parser.add_argument(
        "--fft-size",
        type=int,
        default=defaults.fft_size,
        help=f"FFT size, power of two (default: {defaults.fft_size})",
    )
    parser.add_argument(
        "--max-frames",
        type=int,
        default=defaults.max_frames,
        help=f"Maximum number of feature frames (default: {defaults.max_frames})",
    )
    parser.add_argument(
        "--anchors",
        type=int,
        default=None,
        help=(
            "Number of anchor frames (rows) in the similarity matrix "
            f"(default: min({defaults.anchor_count}, frames extracted))"
        ),
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads for the similarity matrix (default: single-threaded)",
    )
    parser.add_argument(
        "--features-out",
        type=Path,
        default=None,
        help="Write MFCC vectors here, one comma-separated line per frame",
    )
    parser.add_argument(
        "--similarity-out",
        type=Path,
        default=None,
        help="Write flattened similarity values here, one per line",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def run(args: argparse.Namespace) -> int:
    config = MfccConfig(
        sample_rate=args.sample_rate,
        fft_size=args.fft_size,
        high_freq=min(MfccConfig.high_freq, args.sample_rate / 2),
        max_frames=args.max_frames,
    )
    pipeline = Pipeline(config)
    features = pipeline.run(iter_wav_blocks(str(args.wav), config))
    print(f"Extracted {features.shape[0]} frames x {features.shape[1]} coefficients")
    if args.features_out:
        args.features_out.write_text(format_features(features), encoding="utf-8")
        print(f"Saved: {args.features_out}")

    anchors = args.anchors
    if anchors is None:
        anchors = min(config.anchor_count, features.shape[0])
    matrix = build_similarity_matrix(features, anchors, workers=args.workers)
    print(f"Similarity matrix: {matrix.anchor_count} anchors x {matrix.n_frames} frames ({len(matrix)} values)")

    if args.similarity_out:
        args.similarity_out.write_text(format_similarity(matrix.values), encoding="utf-8")
        print(f"Saved: {args.similarity_out}")
    return 0


def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.wav.exists():
        print(f"File not found: {args.wav}", file=sys.stderr)
        sys.exit(1)
    try:
        code = run(args)
    except (MfccError, ValueError) as exc:
        logger.debug("Run failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
