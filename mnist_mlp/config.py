"""Centralized configuration: paths, network shape, hyperparams, seeds."""

from pathlib import Path

# ------ Paths (relative to repo root) ------
ROOT = Path(__file__).resolve().parents[1]
DATA_DIR = ROOT/"data"
EXPORT_DIR = ROOT/"models"

# ------ MNIST files ------
TRAIN_IMAGES_FILE = "train-images-idx3-ubyte.gz"
TRAIN_LABELS_FILE = "train-labels-idx1-ubyte.gz"
TEST_IMAGES_FILE = "t10k-images-idx3-ubyte.gz"
TEST_LABELS_FILE = "t10k-labels-idx1-ubyte.gz"
MNIST_MIRROR = "https://storage.googleapis.com/cvdf-datasets/mnist/"

IDX_IMAGES_MAGIC = 2051
IDX_LABELS_MAGIC = 2049

# ------ Network shape ------
IMAGE_SIDE = 28
NUM_PIXELS = IMAGE_SIDE ** 2
NUM_LABELS = 10
HIDDEN_UNITS = 500

# --- Training schedule ---
BATCH_SIZE = 100
TRAIN_STEPS = 1001  # steps 0..1000 inclusive
LOG_EVERY = 100  # report training error on the current batch
LEARNING_RATE = 1e-5  # small because pixels are fed as raw 0..255 values
SEED = 42

# --- Misc ---
NUM_SAMPLES = 4  # test predictions drawn after training
