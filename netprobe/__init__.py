"""netprobe: run-once network diagnostics with ping, DNS and HTTP probes."""

__version__ = "0.1.0"
