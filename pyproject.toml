[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vfskit"
version = "0.1.0"
description = "A virtual file system layer with in-memory and local-disk backends sharing one file and location interface"
requires-python = ">=3.10"
dependencies = []
keywords = ["vfs", "filesystem", "in-memory", "storage", "abstraction"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vfskit"]

[tool.pytest.ini_options]
addopts = "-ra"
