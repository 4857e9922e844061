"""microbench: run micro-benchmarks under a shared configuration and compare them."""

__version__ = "0.1.0"
