"""JSON values, block headers and Equihash solution encoding for mining clients."""

__version__ = "0.4b0"

__all__ = ["block", "equihash", "jsonvalue", "jsonwriter"]