[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "linequeue"
version = "0.1.0"
description = "A small threaded TCP server that splits incoming data into newline-delimited messages and queues them."
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "server", "socket", "queue", "messages", "threading"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
linequeue = "linequeue.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["linequeue"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
