#!/usr/bin/env python3
"""
Example demonstrating config file override functionality.

This script shows how values from a config file can be overridden
by command-line arguments, demonstrating the priority system:
1. Command-line arguments (highest priority)
2. Config file values
3. Annotation defaults (lowest priority)

Try:
    python override_example.py --config settings.yaml --Workers 2
"""

from dataclasses import dataclass, field

from tagflags import safe_parse


@dataclass
class ServerConfig:
    Usage: str = field(default="", metadata={"tag": "serve files from a directory"})
    Root: str = field(default="", metadata={"tag": "directory to serve | ."})
    Port: int = field(default=0, metadata={"tag": "listen port | 8000"})
    Workers: int = field(default=0, metadata={"tag": "worker processes | 4"})
    Timeout: float = field(default=0.0, metadata={"tag": "request timeout in seconds | 30"})
    ReadOnly: bool = field(default=False, metadata={"tag": "refuse uploads | true"})


if __name__ == "__main__":
    result = safe_parse(ServerConfig(), config_flag="--config")

    if result.is_err():
        print(f"Error: {result.unwrap_err()}")
        raise SystemExit(2)

    config = result.unwrap()
    print("Results:")
    print("-" * 20)
    print(f"Root: {config.Root}")
    print(f"Port: {config.Port}")
    print(f"Workers: {config.Workers}")
    print(f"Timeout: {config.Timeout}")
    print(f"ReadOnly: {config.ReadOnly}")
