[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "schemadoc"
version = "1.68.2"
description = "Database schema model with filtering, repair, cloning and JSON/YAML serialisation for documentation output"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["database", "schema", "documentation", "er-diagram", "json", "yaml"]
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
    "Topic :: Database",
    "Topic :: Documentation",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["schemadoc"]

[tool.pytest.ini_options]
addopts = "-ra"
