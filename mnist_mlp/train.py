"""End-to-end training pipeline: load data, gradient-descent loop, evaluate, export."""
from __future__ import annotations
import logging
import random
from pathlib import Path
import numpy as np
import tensorflow as tf
from .config import (
    DATA_DIR, EXPORT_DIR, BATCH_SIZE, TRAIN_STEPS, LOG_EVERY, LEARNING_RATE,
    HIDDEN_UNITS, NUM_SAMPLES, SEED,
)
from .data_loader import load_mnist, select_batch, encode_image_batch, encode_label_batch
from .evaluate import error_percent, report_test_error, show_predictions
from .model_builder import build_model
from .predict import export_model

logger = logging.getLogger(__name__)


# Optional: be polite with GPU memory
for gpu in tf.config.list_physical_devices('GPU'):
    try:
        tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        # Raised once the device is initialised; the setting then no longer applies
        logger.debug("Could not enable memory growth on %s: %s", gpu.name, e)


def train_model(model, train_images, train_labels,
                steps: int = TRAIN_STEPS, batch_size: int = BATCH_SIZE,
                log_every: int = LOG_EVERY) -> list[tuple[int, float]]:
    """
    Run `steps` gradient-descent updates over cyclic batches.
    Every `log_every` steps the error on the batch just trained on is printed
    as a percentage; the (step, error fraction) pairs are returned.
    """
    history = []
    for step in range(steps):
        images = encode_image_batch(select_batch(step, train_images, batch_size))
        labels = encode_label_batch(select_batch(step, train_labels, batch_size))
        loss = model.train(images, labels)
        if step % log_every == 0:
            err = float(model.error_rate(images, labels))
            print(f"training error {error_percent(err)}")
            logger.debug("step %d loss %.4f", step, float(loss))
            history.append((step, err))
    print()
    return history


def run_pipeline(data_dir: str | Path = DATA_DIR, download: bool = False,
                 steps: int = TRAIN_STEPS, batch_size: int = BATCH_SIZE,
                 learning_rate: float = LEARNING_RATE, hidden_units: int = HIDDEN_UNITS,
                 log_every: int = LOG_EVERY, samples: int = NUM_SAMPLES,
                 seed: int = SEED, export: bool = False,
                 export_root: str | Path = EXPORT_DIR):
    """Run the full pipeline and return (model, test_error, export_dir or None)."""
    random.seed(seed)
    np.random.seed(seed)

    # 1) Data
    (train_images, train_labels), (test_images, test_labels) = load_mnist(data_dir, download)

    # 2) Model
    model = build_model(hidden_units=hidden_units, learning_rate=learning_rate, seed=seed)

    # 3) Train
    logger.info("Training for %d steps, batch size %d", steps, batch_size)
    train_model(model, train_images, train_labels,
                steps=steps, batch_size=batch_size, log_every=log_every)

    # 4) Evaluate
    test_err = report_test_error(model, test_images, test_labels)

    # 5) Show some predictions
    show_predictions(model, test_images, test_labels, count=samples)

    # 6) Export
    export_dir = export_model(model, export_root) if export else None
    return model, test_err, export_dir
