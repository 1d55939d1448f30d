[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mimirgraphite"
version = "0.1.0"
description = "Building blocks for Graphite-on-Mimir services: logfmt logging with context baggage, typed errors with gRPC/HTTP mapping, and config and converter argument helpers."
requires-python = ">=3.10"
dependencies = []
keywords = ["graphite", "mimir", "monitoring", "logging", "logfmt", "errors", "grpc", "whisper"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mimirgraphite"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
