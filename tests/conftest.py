"""Shared fixtures: tiny synthetic MNIST files written in IDX format."""
import gzip
import struct

import numpy as np
import pytest

from mnist_mlp.config import (
    TRAIN_IMAGES_FILE, TRAIN_LABELS_FILE, TEST_IMAGES_FILE, TEST_LABELS_FILE,
)


def write_idx_images(path, images, magic=2051, rows=28, cols=28):
    images = np.asarray(images, dtype=np.uint8)
    header = struct.pack(">IIII", magic, len(images), rows, cols)
    with gzip.open(path, "wb") as f:
        f.write(header + images.tobytes())


def write_idx_labels(path, labels, magic=2049):
    labels = np.asarray(labels, dtype=np.uint8)
    header = struct.pack(">II", magic, len(labels))
    with gzip.open(path, "wb") as f:
        f.write(header + labels.tobytes())


def make_digits(n, seed=0):
    """Images where digit k lights a 16-pixel stripe on row 2k+4, value 64."""
    rng = np.random.default_rng(seed)
    labels = rng.integers(0, 10, size=n).astype(np.uint8)
    images = np.zeros((n, 28, 28), dtype=np.uint8)
    for i, k in enumerate(labels):
        images[i, 2 * k + 4, 6:22] = 64
    return images.reshape(n, 784), labels


@pytest.fixture
def digits():
    return make_digits(60)


@pytest.fixture
def mnist_dir(tmp_path):
    """A data directory holding the four MNIST files with 60 train / 20 test samples."""
    train_x, train_y = make_digits(60, seed=1)
    test_x, test_y = make_digits(20, seed=2)
    write_idx_images(tmp_path / TRAIN_IMAGES_FILE, train_x)
    write_idx_labels(tmp_path / TRAIN_LABELS_FILE, train_y)
    write_idx_images(tmp_path / TEST_IMAGES_FILE, test_x)
    write_idx_labels(tmp_path / TEST_LABELS_FILE, test_y)
    return tmp_path
