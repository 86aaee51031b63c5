"""SavedModel export and single-image inference for SavedModel or live model."""
from __future__ import annotations
import logging
from datetime import datetime
from pathlib import Path
import numpy as np
from PIL import Image, ImageOps
import tensorflow as tf
from .config import EXPORT_DIR, IMAGE_SIDE, NUM_PIXELS

logger = logging.getLogger(__name__)


def export_model(model, export_root: str | Path = EXPORT_DIR) -> Path:
    """Save weights and a `serving_default` signature under a timestamped folder."""
    export_dir = Path(export_root) / datetime.now().strftime("%Y%m%d-%H%M%S")
    export_dir.mkdir(parents=True, exist_ok=True)

    @tf.function(input_signature=[tf.TensorSpec([None, NUM_PIXELS], tf.float32)])
    def serve(x):
        return {"digit": model.infer(x)}

    tf.saved_model.save(model, str(export_dir), signatures={"serving_default": serve})
    logger.info("SavedModel exported to: %s", export_dir)
    return export_dir


def load_image(path: str | Path, invert: bool = False) -> np.ndarray:
    """
    Load a picture as a (1, 784) float32 batch of raw 0..255 grey values.
    MNIST digits are light strokes on black; pass invert=True for dark-on-light input.
    """
    im = Image.open(path).convert("L").resize((IMAGE_SIDE, IMAGE_SIDE))
    if invert:
        im = ImageOps.invert(im)
    return np.asarray(im, dtype=np.float32).reshape(1, NUM_PIXELS)


def predict_with_savedmodel(export_dir: str | Path, img_path: str | Path,
                            invert: bool = False) -> int:
    m = tf.saved_model.load(str(export_dir))
    f = m.signatures["serving_default"]
    x = load_image(img_path, invert=invert)
    y = f(tf.constant(x))["digit"].numpy().squeeze().item()
    return int(y)


def predict_with_model(model, img_path: str | Path, invert: bool = False) -> int:
    x = load_image(img_path, invert=invert)
    return int(model.infer(x).numpy()[0])
