"""Two-layer fully-connected network trained on MNIST with TensorFlow."""

__version__ = "1.0.0"
