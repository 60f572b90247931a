[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "workpool"
version = "0.1.0"
description = "Thread pools with fixed and cached modes, result handles, futures, a message worker pool and small HTTP request helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["thread pool", "worker", "concurrency", "futures", "task queue", "http"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
workpool-demo = "workpool.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["workpool"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
