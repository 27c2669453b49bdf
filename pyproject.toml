[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "racerkit"
version = "0.1.0"
description = "Building blocks for Rust code completion: cargo metadata mapping, source chunking, type models and output formatting"
requires-python = ">=3.10"
dependencies = []
keywords = ["rust", "cargo", "completion", "metadata", "code-analysis"]
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
    "Topic :: Software Development",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["racerkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
