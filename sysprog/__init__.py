"""Systems programming toolkit: property decoding, framed messages, a command shell, pipelines, file search, a service manager, network servers and concurrency helpers."""

__version__ = "0.1.0"

__all__ = [
    "argscan",
    "booklist",
    "color",
    "commands",
    "concurrency",
    "files",
    "filesearch",
    "maps",
    "message",
    "pipeline",
    "prop",
    "reading",
    "rpc",
    "servers",
    "service",
    "shell",
    "stack",
]