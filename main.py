"""
Entry point: trains the MNIST network end-to-end, or classifies one image
with a previously exported SavedModel (--predict IMAGE --model-dir DIR).
"""
import argparse
import logging
import sys

from PIL import UnidentifiedImageError

from mnist_mlp import config
from mnist_mlp.data_loader import MNISTFormatError
from mnist_mlp.logging_config import setup_logging
from mnist_mlp.predict import predict_with_savedmodel
from mnist_mlp.train import run_pipeline

logger = logging.getLogger("mnist_mlp.main")


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Train a two-layer MNIST classifier.")
    p.add_argument("--data-dir", default=str(config.DATA_DIR))
    p.add_argument("--download", action="store_true", help="fetch missing MNIST files")
    p.add_argument("--steps", type=int, default=config.TRAIN_STEPS)
    p.add_argument("--batch-size", type=int, default=config.BATCH_SIZE)
    p.add_argument("--learning-rate", type=float, default=config.LEARNING_RATE)
    p.add_argument("--hidden-units", type=int, default=config.HIDDEN_UNITS)
    p.add_argument("--log-every", type=int, default=config.LOG_EVERY)
    p.add_argument("--samples", type=int, default=config.NUM_SAMPLES)
    p.add_argument("--seed", type=int, default=config.SEED)
    p.add_argument("--export", action="store_true", help="save a SavedModel after training")
    p.add_argument("--export-dir", default=str(config.EXPORT_DIR))
    p.add_argument("--predict", metavar="IMAGE", help="classify IMAGE instead of training")
    p.add_argument("--model-dir", help="SavedModel directory used with --predict")
    p.add_argument("--invert", action="store_true", help="image is dark digit on light background")
    p.add_argument("--log-level", default=None)
    p.add_argument("--log-file", default=None, help="also write log records to this file")
    args = p.parse_args(argv)
    if args.predict and not args.model_dir:
        p.error("--predict requires --model-dir")
    if args.steps < 0 or args.batch_size < 1 or args.log_every < 1:
        p.error("--steps must be >= 0, --batch-size and --log-every >= 1")
    return args


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, log_file=args.log_file)

    if args.predict:
        try:
            digit = predict_with_savedmodel(args.model_dir, args.predict, invert=args.invert)
        except (OSError, UnidentifiedImageError) as e:
            logger.error("%s", e)
            return 1
        print(f"predicted {digit}")
        return 0

    try:
        _, _, export_dir = run_pipeline(
            data_dir=args.data_dir, download=args.download,
            steps=args.steps, batch_size=args.batch_size,
            learning_rate=args.learning_rate, hidden_units=args.hidden_units,
            log_every=args.log_every, samples=args.samples, seed=args.seed,
            export=args.export, export_root=args.export_dir,
        )
    except (FileNotFoundError, MNISTFormatError) as e:
        logger.error("%s", e)
        return 1
    if export_dir is not None:
        print("Training complete, Exported SavedModel:", export_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
