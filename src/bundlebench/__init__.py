"""bundlebench: compare build times and sizes of two bundler releases."""

__version__ = "0.1.0"
