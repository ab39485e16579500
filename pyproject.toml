[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sbomconform"
version = "0.1.0"
description = "Check SPDX 2.3 SBOMs for conformance with the Google, EO and SPDX minimum-element specs"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["sbom", "spdx", "conformance", "supply-chain", "compliance"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Quality Assurance",
    "Topic :: Security",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sbomconform = "sbomconform.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sbomconform"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
