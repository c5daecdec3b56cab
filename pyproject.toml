[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "buddyos"
version = "0.1.0"
description = "Hobby-kernel core as plain Python objects: buddy allocator, page tables, PS/2 input, framebuffer GUI and TTY"
requires-python = ">=3.10"
dependencies = []
keywords = ["kernel", "buddy-allocator", "paging", "ps2", "framebuffer", "tty", "simulation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System Kernels",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["buddyos"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
