"""PredictX - client for the PredictX CosmWasm prediction market."""

__version__ = "0.1.0"
