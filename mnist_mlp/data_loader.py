"""MNIST IDX parsing, optional download, cyclic batching and ASCII drawing."""
from __future__ import annotations
import gzip
import logging
from pathlib import Path
import numpy as np
from tensorflow.keras.utils import get_file
from .config import (
    DATA_DIR, MNIST_MIRROR, NUM_PIXELS, IMAGE_SIDE,
    TRAIN_IMAGES_FILE, TRAIN_LABELS_FILE, TEST_IMAGES_FILE, TEST_LABELS_FILE,
    IDX_IMAGES_MAGIC, IDX_LABELS_MAGIC,
)

logger = logging.getLogger(__name__)

MNIST_FILES = (TRAIN_IMAGES_FILE, TRAIN_LABELS_FILE, TEST_IMAGES_FILE, TEST_LABELS_FILE)

# Shades for pixel values 1..255, indexed by value // 64
_SHADES = "░▒▓█"


class MNISTFormatError(ValueError):
    """Raised when an IDX file is malformed or truncated."""


def _read_bytes(path: str | Path) -> bytes:
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(
            f"MNIST file not found: {path} (run with --download to fetch it)"
        )
    opener = gzip.open if path.suffix == ".gz" else open
    with opener(path, "rb") as f:
        return f.read()


def _read_header(raw: bytes, fields: int, expected_magic: int, path) -> list[int]:
    """Decode `fields` big-endian uint32 values and check the magic number."""
    if len(raw) < 4 * fields:
        raise MNISTFormatError(f"{path}: truncated IDX header")
    header = np.frombuffer(raw, dtype=">u4", count=fields).astype(np.int64).tolist()
    if header[0] != expected_magic:
        raise MNISTFormatError(
            f"{path}: bad magic number {header[0]} (expected {expected_magic})"
        )
    return header


def read_mnist_samples(path: str | Path) -> np.ndarray:
    """
    Parse an IDX3 image file into a uint8 array of shape (count, rows*cols).
    Each row is one image flattened in row-major order.
    """
    raw = _read_bytes(path)
    _, count, rows, cols = _read_header(raw, 4, IDX_IMAGES_MAGIC, path)
    size = rows * cols
    payload = raw[16:]
    if len(payload) < count * size:
        raise MNISTFormatError(
            f"{path}: expected {count * size} pixel bytes, found {len(payload)}"
        )
    return np.frombuffer(payload, dtype=np.uint8, count=count * size).reshape(count, size)


def read_mnist_labels(path: str | Path) -> np.ndarray:
    """Parse an IDX1 label file into a uint8 array of shape (count,)."""
    raw = _read_bytes(path)
    _, count = _read_header(raw, 2, IDX_LABELS_MAGIC, path)
    payload = raw[8:]
    if len(payload) < count:
        raise MNISTFormatError(f"{path}: expected {count} labels, found {len(payload)}")
    return np.frombuffer(payload, dtype=np.uint8, count=count)


def maybe_download(data_dir: str | Path = DATA_DIR, mirror: str = MNIST_MIRROR) -> list[Path]:
    """Fetch whichever of the four MNIST files is missing from `data_dir`."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for name in MNIST_FILES:
        target = data_dir/name
        if not target.is_file():
            logger.info("Downloading %s%s", mirror, name)
            fetched = get_file(
                fname=name, origin=mirror + name,
                cache_dir=str(data_dir), cache_subdir="",
            )
            target = Path(fetched)
        paths.append(target)
    return paths


def load_mnist(data_dir: str | Path = DATA_DIR, download: bool = False):
    """Return ((train_images, train_labels), (test_images, test_labels))."""
    data_dir = Path(data_dir)
    if download:
        maybe_download(data_dir)

    train_images = read_mnist_samples(data_dir/TRAIN_IMAGES_FILE)
    train_labels = read_mnist_labels(data_dir/TRAIN_LABELS_FILE)
    test_images = read_mnist_samples(data_dir/TEST_IMAGES_FILE)
    test_labels = read_mnist_labels(data_dir/TEST_LABELS_FILE)

    for split, images, labels in (("train", train_images, train_labels),
                                  ("test", test_images, test_labels)):
        if len(images) != len(labels):
            raise MNISTFormatError(
                f"{split}: {len(images)} images but {len(labels)} labels"
            )
    logger.info("Loaded MNIST: train=%d test=%d", len(train_images), len(test_images))
    return (train_images, train_labels), (test_images, test_labels)


def select_batch(step: int, xs: np.ndarray, batch_size: int) -> np.ndarray:
    """
    The `step`-th window of `batch_size` items over `xs` repeated forever.
    Windows wrap around the end of the data, so every batch is full.
    """
    n = len(xs)
    if n == 0:
        raise ValueError("cannot select a batch from an empty array")
    idx = (np.arange(batch_size) + step * batch_size) % n
    return xs[idx]


def encode_image_batch(images) -> np.ndarray:
    """Stack flattened images into a float32 (n, NUM_PIXELS) matrix of raw byte values."""
    batch = np.asarray(images)
    if batch.ndim != 2 or batch.shape[1] != NUM_PIXELS:
        raise ValueError(f"expected images of shape (n, {NUM_PIXELS}), got {batch.shape}")
    return batch.astype(np.float32)


def encode_label_batch(labels) -> np.ndarray:
    return np.asarray(labels).reshape(-1).astype(np.int32)


def draw_mnist(image) -> str:
    """Render one flattened 28x28 image as text, one line per pixel row."""
    pixels = np.asarray(image).reshape(-1)
    chars = [" " if p == 0 else _SHADES[int(p) // 64] for p in pixels]
    lines = ["".join(chars[i:i + IMAGE_SIDE]) for i in range(0, len(chars), IMAGE_SIDE)]
    return "".join(line + "\n" for line in lines) + "\n"
