[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sysprog"
version = "0.1.0"
description = "Systems programming toolkit: property decoding, framed messages, an extensible shell, pipelines, file search, a service manager and small network servers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "systems-programming",
    "shell",
    "pipeline",
    "file-search",
    "sockets",
    "xml-rpc",
    "daemon",
    "concurrency",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: System :: Networking",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sysprog-shell = "sysprog.shell:main"
sysprog-search = "sysprog.filesearch:main"
sysprog-files = "sysprog.files:main"
sysprog-pipeline = "sysprog.pipeline:main"
sysprog-service = "sysprog.service:main"
sysprog-server = "sysprog.servers:main"
sysprog-rpc = "sysprog.rpc:main"
sysprog-books = "sysprog.booklist:main"
sysprog-colors = "sysprog.color:main"
sysprog-prop = "sysprog.prop:main"

[tool.hatch.build.targets.wheel]
packages = ["sysprog"]

[tool.hatch.build.targets.sdist]
include = ["sysprog", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
