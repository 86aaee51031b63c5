"""Two-layer fully-connected MNIST classifier built from raw TensorFlow variables."""
from __future__ import annotations
import logging
import math
import tensorflow as tf
from .config import NUM_PIXELS, NUM_LABELS, HIDDEN_UNITS, LEARNING_RATE

logger = logging.getLogger(__name__)


def random_param(width: int, shape) -> tf.Tensor:
    """Truncated-normal values scaled by 1/sqrt(width), width being the fan-in."""
    stddev = 1.0 / math.sqrt(width)
    return tf.random.truncated_normal(shape, mean=0.0, stddev=1.0) * stddev


class MNISTModel(tf.Module):
    """
    images -> relu(images @ W_h + b_h) @ W_l + b_l -> logits.

    Training is plain gradient descent written out by hand: every parameter
    is moved by -learning_rate * gradient of the mean softmax cross-entropy.
    All entry points accept any batch size.
    """

    def __init__(self, hidden_units: int = HIDDEN_UNITS,
                 learning_rate: float = LEARNING_RATE, name=None):
        super().__init__(name=name)
        self.hidden_units = hidden_units
        self.learning_rate = learning_rate
        # Hidden layer
        self.hidden_weights = tf.Variable(
            random_param(NUM_PIXELS, [NUM_PIXELS, hidden_units]), name="hidden_weights")
        self.hidden_biases = tf.Variable(tf.zeros([hidden_units]), name="hidden_biases")
        # Logits
        self.logit_weights = tf.Variable(
            random_param(hidden_units, [hidden_units, NUM_LABELS]), name="logit_weights")
        self.logit_biases = tf.Variable(tf.zeros([NUM_LABELS]), name="logit_biases")

    @property
    def params(self) -> list[tf.Variable]:
        return [self.hidden_weights, self.hidden_biases,
                self.logit_weights, self.logit_biases]

    def logits(self, images: tf.Tensor) -> tf.Tensor:
        hidden = tf.nn.relu(tf.matmul(images, self.hidden_weights) + self.hidden_biases)
        return tf.matmul(hidden, self.logit_weights) + self.logit_biases

    def _loss(self, images, labels):
        label_vecs = tf.one_hot(labels, NUM_LABELS, on_value=1.0, off_value=0.0)
        xent = tf.nn.softmax_cross_entropy_with_logits(
            labels=label_vecs, logits=self.logits(images))
        return tf.reduce_mean(xent)

    @tf.function(input_signature=[
        tf.TensorSpec([None, NUM_PIXELS], tf.float32),
        tf.TensorSpec([None], tf.int32),
    ])
    def loss(self, images, labels):
        return self._loss(images, labels)

    @tf.function(input_signature=[
        tf.TensorSpec([None, NUM_PIXELS], tf.float32),
        tf.TensorSpec([None], tf.int32),
    ])
    def train(self, images, labels):
        """One gradient-descent update; returns the loss before the update."""
        with tf.GradientTape() as tape:
            loss = self._loss(images, labels)
        grads = tape.gradient(loss, self.params)
        for param, grad in zip(self.params, grads):
            param.assign_sub(self.learning_rate * grad)
        return loss

    @tf.function(input_signature=[tf.TensorSpec([None, NUM_PIXELS], tf.float32)])
    def infer(self, images):
        probs = tf.nn.softmax(self.logits(images))
        return tf.cast(tf.argmax(probs, axis=1), tf.int32)

    @tf.function(input_signature=[
        tf.TensorSpec([None, NUM_PIXELS], tf.float32),
        tf.TensorSpec([None], tf.int32),
    ])
    def error_rate(self, images, labels):
        correct = tf.equal(self.infer(images), labels)
        return 1.0 - tf.reduce_mean(tf.cast(correct, tf.float32))


def build_model(hidden_units: int = HIDDEN_UNITS,
                learning_rate: float = LEARNING_RATE,
                seed: int | None = None) -> MNISTModel:
    """Create the model; `seed` fixes the weight initialisation."""
    if seed is not None:
        tf.random.set_seed(seed)
    model = MNISTModel(hidden_units=hidden_units, learning_rate=learning_rate)
    logger.info("Built model: %d -> %d -> %d, lr=%g",
                NUM_PIXELS, hidden_units, NUM_LABELS, learning_rate)
    return model
