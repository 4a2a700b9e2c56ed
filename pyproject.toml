[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zerolaunch"
version = "0.1.0"
description = "Storage, configuration and image helpers for a keyboard-driven application launcher"
requires-python = ">=3.10"
keywords = ["launcher", "webdav", "storage", "configuration", "favicon", "icons", "k-means"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]
dependencies = [
    "requests>=2.28",
    "beautifulsoup4>=4.11",
    "pillow>=9.0",
    "numpy>=1.23",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[tool.hatch.build.targets.wheel]
packages = ["zerolaunch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
