"""Core configuration, logging, constants and exceptions for trace-demo."""
