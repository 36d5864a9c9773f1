"""convolab – pure-Python convolution and FFT signal processing toolkit."""

__version__ = "0.1.0"
