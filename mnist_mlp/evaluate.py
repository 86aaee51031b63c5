"""Evaluation helpers: full test-set error rate and sample predictions."""
from __future__ import annotations
import numpy as np
from .config import NUM_SAMPLES
from .data_loader import encode_image_batch, encode_label_batch, draw_mnist


def error_percent(err) -> str:
    """
    Format an error fraction as a percentage.
    The product is taken in float32 and printed in its shortest float32 form,
    so 0.10000002 prints as 10.000002 rather than 10.000002384185791.
    """
    pct = np.float32(err) * np.float32(100)
    return np.format_float_positional(pct, trim="0")


def test_error(model, images, labels) -> float:
    """Error rate (fraction in [0, 1]) over the whole set, run as one batch."""
    err = model.error_rate(encode_image_batch(images), encode_label_batch(labels))
    return float(err)


def report_test_error(model, images, labels) -> float:
    err = test_error(model, images, labels)
    print(f"test error {error_percent(err)}")
    return err


def show_predictions(model, images, labels, count: int = NUM_SAMPLES) -> np.ndarray:
    """Print the first `count` test images with expected and predicted digits."""
    preds = model.infer(encode_image_batch(images)).numpy()
    for i in range(min(count, len(images))):
        print()
        print(draw_mnist(images[i]))
        print(f"expected {int(labels[i])}")
        print(f"     got {int(preds[i])}")
    return preds
