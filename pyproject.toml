[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "icefire_proxy"
version = "0.1.0"
description = "Routing, middleware and RESP handling for a Redis-protocol proxy: command validation, filtering, namespacing, key monitoring and forwarding to a node or a cluster client."
requires-python = ">=3.10"
dependencies = []
keywords = ["redis", "resp", "proxy", "router", "middleware", "cluster"]
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
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["icefire_proxy"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
